"""float-mcp - MCP gateway for the Float resource-scheduling API."""

from .api import FloatAPI
from .config import Settings, load_settings
from .core import (
    TOOL_FAMILIES,
    AdmissionTimeoutError,
    AuthError,
    ConfigurationError,
    GatewayError,
    NotFoundError,
    RateLimitError,
    ResponseFormat,
    ToolName,
    UpstreamError,
    ValidationError,
)
from .registration import build_default_registry
from .runtime import (
    AdmissionQueue,
    BulkExecutor,
    BulkOutcome,
    OperationRegistry,
    OperationRouter,
    PagePolicy,
    PaginationAggregator,
    RequestExecutor,
)
from .tools import invoke_tool

__version__ = "0.1.0"

__all__ = [
    # Facade
    "FloatAPI",
    "invoke_tool",
    "build_default_registry",
    # Configuration
    "Settings",
    "load_settings",
    # Runtime
    "AdmissionQueue",
    "BulkExecutor",
    "BulkOutcome",
    "OperationRegistry",
    "OperationRouter",
    "PagePolicy",
    "PaginationAggregator",
    "RequestExecutor",
    # Enums
    "ResponseFormat",
    "ToolName",
    "TOOL_FAMILIES",
    # Exceptions
    "GatewayError",
    "ConfigurationError",
    "ValidationError",
    "UpstreamError",
    "AuthError",
    "NotFoundError",
    "RateLimitError",
    "AdmissionTimeoutError",
]
