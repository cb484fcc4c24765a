"""Page-driving aggregation over list endpoints.

This module provides the PaginationAggregator, which repeatedly executes a
list request, advancing the page number by one each time, and concatenates
the pages into a single ordered list.

Design Decisions:
    - per-page is always sent, so the terminal-page test compares against
      the size actually requested
    - A caller that pins both page and per-page gets exactly that page
    - A terminal page is empty or shorter than per-page
    - Exceeding the page cap without a terminal page is an UpstreamError
"""

from __future__ import annotations

from collections.abc import Mapping
from time import perf_counter
from typing import TYPE_CHECKING, Any

from ...core.enums import HttpMethod, ResponseFormat
from ...core.exceptions import UpstreamError, ValidationError
from ..rest.executor import RequestDescriptor, ResponseAdapter
from .definitions import PAGE_PARAM, PER_PAGE_PARAM, PagePlan, PagePolicy, PageResult
from .telemetry import log_page_completed, log_page_error, log_page_plan, log_pagination_complete

if TYPE_CHECKING:
    from ..rest.executor import RequestExecutor


class PaginationAggregator:
    """Drives the request executor across pages of a list endpoint."""

    def __init__(self, executor: RequestExecutor, policy: PagePolicy | None = None) -> None:
        """Initialize the aggregator.

        Args:
            executor: Request executor used for every page
            policy: Paging limits (defaults to the service defaults)
        """
        self._executor = executor
        self._policy = policy or PagePolicy()

    @property
    def policy(self) -> PagePolicy:
        return self._policy

    def plan(self, filters: Mapping[str, Any] | None) -> PagePlan:
        """Derive the page plan from caller filters.

        Raises:
            ValidationError: page or per-page is not an integer >= 1
        """
        filters = filters or {}
        page = _positive_int(filters.get(PAGE_PARAM), PAGE_PARAM)
        per_page = _positive_int(filters.get(PER_PAGE_PARAM), PER_PAGE_PARAM)
        return PagePlan(
            start_page=page or 1,
            per_page=min(per_page or self._policy.default_page_size, self._policy.max_page_size),
            single_page=page is not None and per_page is not None,
        )

    async def execute(
        self,
        path: str,
        filters: Mapping[str, Any] | None = None,
        adapter: ResponseAdapter | None = None,
        response_format: ResponseFormat = ResponseFormat.JSON,
    ) -> PageResult:
        """Fetch pages until a terminal page and aggregate them.

        Args:
            path: List endpoint path
            filters: Query filters, optionally including page and per-page
            adapter: Optional adapter applied to each page
            response_format: Negotiated response encoding

        Returns:
            PageResult with items in backend order
        """
        plan = self.plan(filters)
        log_page_plan(path=path, plan=plan)
        base_query = {
            k: v for k, v in (filters or {}).items() if k not in (PAGE_PARAM, PER_PAGE_PARAM)
        }

        items: list[Any] = []
        pages_fetched = 0
        page = plan.start_page
        started = perf_counter()

        while True:
            if pages_fetched >= self._policy.max_pages:
                raise UpstreamError(
                    f"GET {path} exceeded {self._policy.max_pages} pages without a terminal page"
                )

            descriptor = RequestDescriptor(
                HttpMethod.GET,
                path,
                query={**base_query, PAGE_PARAM: page, PER_PAGE_PARAM: plan.per_page},
                adapter=adapter,
                response_format=response_format,
                many=True,
            )
            page_start = perf_counter()
            try:
                payload = await self._executor.execute(descriptor)
            except Exception as e:
                log_page_error(
                    path=path,
                    page=page,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            pages_fetched += 1

            page_items = _page_items(payload)
            log_page_completed(
                path=path,
                page=page,
                items=len(page_items),
                latency_ms=(perf_counter() - page_start) * 1000.0,
            )
            items.extend(page_items)

            if plan.single_page or len(page_items) < plan.per_page:
                break
            page += 1

        result = PageResult(items=items, pages_fetched=pages_fetched, single_page=plan.single_page)
        log_pagination_complete(
            path=path,
            result=result,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result

    async def fetch_all(
        self,
        path: str,
        filters: Mapping[str, Any] | None = None,
        adapter: ResponseAdapter | None = None,
        response_format: ResponseFormat = ResponseFormat.JSON,
    ) -> list[Any]:
        """Aggregate a list endpoint and return only the items."""
        result = await self.execute(path, filters, adapter, response_format)
        return result.items


def _page_items(payload: Any) -> list[Any]:
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def _positive_int(value: Any, name: str) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"'{name}' must be an integer >= 1")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"'{name}' must be an integer >= 1") from e
    if number < 1:
        raise ValidationError(f"'{name}' must be an integer >= 1, got {number}")
    return number
