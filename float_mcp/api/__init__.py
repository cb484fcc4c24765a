"""High-level API facade."""

from .float_api import FloatAPI

__all__ = ["FloatAPI"]
