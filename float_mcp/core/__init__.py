"""Core components."""

from .enums import TOOL_FAMILIES, HttpMethod, ResponseFormat, ToolName
from .exceptions import (
    AdmissionTimeoutError,
    AuthError,
    ConfigurationError,
    GatewayError,
    NotFoundError,
    RateLimitError,
    UpstreamError,
    ValidationError,
    error_for_status,
    validation_details,
)

__all__ = [
    "HttpMethod",
    "ResponseFormat",
    "ToolName",
    "TOOL_FAMILIES",
    "GatewayError",
    "ConfigurationError",
    "ValidationError",
    "UpstreamError",
    "AuthError",
    "NotFoundError",
    "RateLimitError",
    "AdmissionTimeoutError",
    "error_for_status",
    "validation_details",
]
