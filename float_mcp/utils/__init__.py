"""Utility functions."""

from .logging_config import build_formatter, configure_logging

__all__ = ["build_formatter", "configure_logging"]
