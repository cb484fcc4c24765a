"""Gateway runtime: admission control, request execution, pagination,
bulk execution and operation routing."""

from __future__ import annotations

from .admission import AdmissionQueue
from .bulk import BulkExecutor, BulkItemResult, BulkOutcome, BulkSummary
from .pagination import PagePlan, PagePolicy, PageResult, PaginationAggregator
from .registry import (
    OperationHandler,
    OperationKey,
    OperationRegistry,
    collect_operation_handlers,
    operation_handler,
)
from .rest import (
    HTTPClient,
    HTTPResponse,
    ModelAdapter,
    RequestDescriptor,
    RequestExecutor,
    ResponseAdapter,
)
from .router import OperationContext, OperationRouter

__all__ = [
    "AdmissionQueue",
    "BulkExecutor",
    "BulkItemResult",
    "BulkOutcome",
    "BulkSummary",
    "HTTPClient",
    "HTTPResponse",
    "ModelAdapter",
    "OperationContext",
    "OperationHandler",
    "OperationKey",
    "OperationRegistry",
    "OperationRouter",
    "PagePlan",
    "PagePolicy",
    "PageResult",
    "PaginationAggregator",
    "RequestDescriptor",
    "RequestExecutor",
    "ResponseAdapter",
    "collect_operation_handlers",
    "operation_handler",
]
