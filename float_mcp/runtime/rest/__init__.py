"""REST transport, codecs and request execution."""

from __future__ import annotations

from .executor import ModelAdapter, RequestDescriptor, RequestExecutor, ResponseAdapter
from .http import HTTPClient, HTTPResponse

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "RequestDescriptor",
    "RequestExecutor",
    "ResponseAdapter",
    "ModelAdapter",
]
