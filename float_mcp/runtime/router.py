"""Operation router dispatching (family, operation) calls to handlers.

The OperationRouter is the central coordinator that:
1. Looks up the handler for a (family, operation) key
2. Validates caller parameters against the handler's model
3. Builds the OperationContext for the call
4. Invokes the handler and returns its result unchanged

Architecture:
    Handlers never see the network directly. They receive an
    OperationContext exposing the request executor, the pagination
    aggregator and a bulk executor factory, plus the negotiated response
    format and an injectable clock for derived date filters.

Design Decisions:
    - Single lookup; a miss is a ValidationError naming both family and
      operation and listing the operations the family does support
    - Parameter validation happens before any network call
    - Handler errors propagate unchanged; only the bulk executor absorbs
      failures, and only per item
    - today() is injected so date-derived reads are testable

Request Flow:
    1. Lookup -> fail fast on unknown keys
    2. Validation -> pydantic model per operation
    3. Dispatch -> handler(ctx, params)

See Also:
    - OperationRegistry: The lookup table
    - FloatAPI: Facade that owns the router and the gateway
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

import pydantic

from ..core.enums import ResponseFormat
from ..core.exceptions import ValidationError, validation_details
from .bulk import BulkExecutor, BulkOutcome
from .rest.executor import ResponseAdapter

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from .pagination import PaginationAggregator
    from .registry import OperationRegistry
    from .rest.executor import RequestExecutor

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OperationContext:
    """Per-call view of the gateway handed to handlers."""

    executor: RequestExecutor
    paginator: PaginationAggregator
    response_format: ResponseFormat = ResponseFormat.JSON
    clock: Callable[[], datetime] = _utcnow

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> date:
        return self.clock().date()

    async def get(
        self,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        adapter: ResponseAdapter | None = None,
    ) -> Any:
        return await self.executor.get(
            path, query=query, adapter=adapter, response_format=self.response_format
        )

    async def post(self, path: str, body: Any, *, adapter: ResponseAdapter | None = None) -> Any:
        return await self.executor.post(
            path, body, adapter=adapter, response_format=self.response_format
        )

    async def patch(self, path: str, body: Any, *, adapter: ResponseAdapter | None = None) -> Any:
        return await self.executor.patch(
            path, body, adapter=adapter, response_format=self.response_format
        )

    async def delete(self, path: str) -> Any:
        return await self.executor.delete(path, response_format=self.response_format)

    async def list_all(
        self,
        path: str,
        filters: Mapping[str, Any] | None = None,
        *,
        adapter: ResponseAdapter | None = None,
    ) -> list[Any]:
        """Aggregate every page of a list endpoint."""
        return await self.paginator.fetch_all(path, filters, adapter, self.response_format)

    async def bulk(
        self,
        name: str,
        items: Sequence[Any],
        action: Callable[[Any], Awaitable[Any]],
    ) -> BulkOutcome:
        return await BulkExecutor(name).run(items, action)


class OperationRouter:
    """Routes (family, operation, params) calls through the registry."""

    def __init__(
        self,
        registry: OperationRegistry,
        executor: RequestExecutor,
        paginator: PaginationAggregator,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the router.

        Args:
            registry: Operation lookup table
            executor: Request executor shared by all handlers
            paginator: Pagination aggregator shared by all handlers
            clock: Returns the current UTC time; injectable for tests
        """
        self._registry = registry
        self._context = OperationContext(executor=executor, paginator=paginator, clock=clock)

    @property
    def registry(self) -> OperationRegistry:
        return self._registry

    async def route(
        self,
        family: str,
        operation: str,
        params: Mapping[str, Any] | None = None,
        *,
        response_format: ResponseFormat | str | None = None,
    ) -> Any:
        """Dispatch one call.

        Args:
            family: Resource family (e.g. "people")
            operation: Operation within the family (e.g. "list")
            params: Raw caller parameters
            response_format: json, xml or csv (downgraded to json)

        Returns:
            The handler's result

        Raises:
            ValidationError: Unknown key, bad format or invalid parameters
            GatewayError: Anything the handler raises, unchanged
        """
        handler = self._registry.get(family, operation)
        if handler is None:
            logger.warning(
                "operation_not_found",
                extra={"family": family, "operation": operation},
            )
            raise ValidationError(
                f"Unsupported operation '{operation}' for family '{family}'",
                family=family,
                operation=operation,
                details=self._registry.describe(family),
            )

        try:
            fmt = ResponseFormat.coerce(response_format)
        except ValueError as e:
            raise ValidationError(
                f"Unsupported format '{response_format}'",
                family=family,
                operation=operation,
            ) from e

        try:
            validated = handler.params_model.model_validate(dict(params or {}))
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid parameters for {family}/{operation}",
                family=family,
                operation=operation,
                details=validation_details(e),
            ) from e

        logger.debug(
            "Routing operation",
            extra={"family": family, "operation": operation, "format": fmt.value},
        )
        ctx = replace(self._context, response_format=fmt)
        return await handler.func(ctx, validated)
