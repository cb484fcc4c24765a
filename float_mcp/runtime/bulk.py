"""Sequential bulk execution with per-item failure isolation.

Architecture:
    BulkExecutor.run() awaits an action for each input item in order. Each
    outcome is recorded as a BulkItemResult tagged with the item's input
    index; a failing item never stops the remaining items. The BulkOutcome
    carries the ordered results and a summary whose counts always add up to
    the number of inputs.

Error Capture:
    - GatewayError subclasses are recorded as raised
    - pydantic validation failures become ValidationError with field details
    - Anything else is logged with traceback and recorded as UpstreamError
      without a status code
    - asyncio.CancelledError is not an Exception and propagates
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Generic, TypeVar

import pydantic

from ..core.exceptions import GatewayError, UpstreamError, ValidationError, validation_details

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BulkItemResult:
    """Outcome of one item; ``index`` is the position in the input."""

    index: int
    success: bool
    value: Any = None
    error: GatewayError | None = None
    item: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"index": self.index, "success": self.success}
        if self.success:
            data["data"] = self.value
        else:
            data["error"] = self.error.to_dict() if self.error else None
            data["item"] = self.item
        return data


@dataclass(frozen=True)
class BulkSummary:
    total: int
    successful: int
    failed: int


@dataclass(frozen=True)
class BulkOutcome:
    """Ordered per-item results plus aggregate counts."""

    results: tuple[BulkItemResult, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> BulkSummary:
        successful = sum(1 for r in self.results if r.success)
        return BulkSummary(
            total=len(self.results),
            successful=successful,
            failed=len(self.results) - successful,
        )

    @property
    def success(self) -> bool:
        """True when no item failed."""
        return all(r.success for r in self.results)

    @property
    def succeeded(self) -> list[BulkItemResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[BulkItemResult]:
        return [r for r in self.results if not r.success]

    def to_dict(self) -> dict[str, Any]:
        """Tool-facing shape: success flag, successes, failures and summary."""
        summary = self.summary
        return {
            "success": self.success,
            "results": [r.to_dict() for r in self.succeeded],
            "errors": [r.to_dict() for r in self.failed],
            "summary": {
                "total": summary.total,
                "successful": summary.successful,
                "failed": summary.failed,
            },
        }


class BulkExecutor(Generic[T]):
    """Runs independent sub-operations sequentially and collects outcomes."""

    def __init__(self, name: str = "bulk") -> None:
        self.name = name

    async def run(
        self,
        items: Sequence[T],
        action: Callable[[T], Awaitable[Any]],
    ) -> BulkOutcome:
        """Execute ``action`` for every item in input order.

        Args:
            items: Input items
            action: Async callable applied to each item

        Returns:
            BulkOutcome with one result per item, in input order
        """
        results: list[BulkItemResult] = []
        started = perf_counter()

        for index, item in enumerate(items):
            try:
                value = await action(item)
            except Exception as e:
                error = self._capture(e)
                logger.warning(
                    "bulk_item_failed",
                    extra={
                        "bulk": self.name,
                        "index": index,
                        "error_kind": error.kind,
                        "status_code": error.status_code,
                    },
                )
                results.append(BulkItemResult(index=index, success=False, error=error, item=item))
            else:
                results.append(BulkItemResult(index=index, success=True, value=value))

        outcome = BulkOutcome(results=tuple(results))
        summary = outcome.summary
        logger.info(
            "bulk_run_complete",
            extra={
                "bulk": self.name,
                "total": summary.total,
                "successful": summary.successful,
                "failed": summary.failed,
                "latency_ms": (perf_counter() - started) * 1000.0,
            },
        )
        return outcome

    def _capture(self, exc: Exception) -> GatewayError:
        if isinstance(exc, GatewayError):
            return exc
        if isinstance(exc, pydantic.ValidationError):
            return ValidationError("Invalid bulk item", details=validation_details(exc))
        logger.exception("bulk_item_unexpected_error", extra={"bulk": self.name})
        return UpstreamError(f"{type(exc).__name__}: {exc}")
