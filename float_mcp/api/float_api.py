"""FloatAPI facade owning the gateway and the operation router.

Architecture:
    This module implements the Facade pattern over the runtime pieces:
    - HTTPClient: aiohttp session bound to the service base URL
    - AdmissionQueue: sliding-window quota shared by every request
    - RequestExecutor: single call with headers, decoding and error mapping
    - PaginationAggregator: page-driving reads over list endpoints
    - OperationRouter: (family, operation) dispatch through the registry

Design Decisions:
    - One FloatAPI per process; every tool call shares its admission queue
    - HTTP client injection allows tests to substitute an in-memory backend
    - Context manager pattern ensures the sweep task and session are closed

See Also:
    - OperationRouter: The underlying dispatch
    - registration.build_default_registry: The default operation catalogue
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..config import DEFAULT_BASE_URL
from ..core.enums import ResponseFormat
from ..registration import build_default_registry
from ..runtime.admission import AdmissionQueue
from ..runtime.pagination import PagePolicy, PaginationAggregator
from ..runtime.rest import HTTPClient, RequestExecutor
from ..runtime.router import OperationRouter

if TYPE_CHECKING:
    from ..config import Settings
    from ..runtime.registry import OperationRegistry

logger = logging.getLogger(__name__)


class FloatAPI:
    """High-level entry point for calling operations against the service.

    Example:
        >>> async with FloatAPI(api_key="...") as api:
        ...     people = await api.route("people", "list", {"active": 1})
        ...     report = await api.route(
        ...         "reports", "time-report", {"start_date": "2024-01-01", "group_by": "project"}
        ...     )
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        window_ms: int = 60_000,
        max_requests: int = 100,
        max_wait_ms: int | None = None,
        timeout: float = 30.0,
        user_agent: str | None = None,
        page_policy: PagePolicy | None = None,
        registry: OperationRegistry | None = None,
        http: HTTPClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the API.

        Args:
            api_key: Bearer token for the service
            base_url: Service base URL
            window_ms: Admission window length in milliseconds
            max_requests: Requests admitted per window
            max_wait_ms: Optional bound on time spent waiting for admission
            timeout: Per-request timeout in seconds
            user_agent: Optional User-Agent header value
            page_policy: Paging limits (defaults to the service defaults)
            registry: Operation table (defaults to the full catalogue)
            http: Optional HTTP client (creates one if not provided)
            clock: UTC clock for date-derived filters
        """
        self._owns_http = http is None
        self._http = http or HTTPClient(base_url, timeout=timeout)
        self._admission = AdmissionQueue(window_ms, max_requests, max_wait_ms=max_wait_ms)
        self._executor = RequestExecutor(
            self._http, self._admission, api_key=api_key, user_agent=user_agent
        )
        self._paginator = PaginationAggregator(self._executor, page_policy)
        router_kwargs = {"clock": clock} if clock is not None else {}
        self._router = OperationRouter(
            registry or build_default_registry(),
            self._executor,
            self._paginator,
            **router_kwargs,
        )
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> FloatAPI:
        """Build an API from loaded settings; kwargs override or add arguments."""
        options: dict[str, Any] = {
            "api_key": settings.FLOAT_API_KEY,
            "base_url": settings.FLOAT_API_BASE_URL,
            "window_ms": settings.RATE_LIMIT_WINDOW_MS,
            "max_requests": settings.RATE_LIMIT_MAX_REQUESTS,
            "max_wait_ms": settings.ADMISSION_MAX_WAIT_MS,
            "timeout": settings.REQUEST_TIMEOUT_SECONDS,
            "user_agent": settings.USER_AGENT,
            "page_policy": PagePolicy(
                default_page_size=settings.DEFAULT_PAGE_SIZE,
                max_pages=settings.MAX_PAGES,
            ),
        }
        options.update(kwargs)
        return cls(**options)

    @property
    def router(self) -> OperationRouter:
        return self._router

    @property
    def registry(self) -> OperationRegistry:
        return self._router.registry

    @property
    def admission(self) -> AdmissionQueue:
        return self._admission

    async def route(
        self,
        family: str,
        operation: str,
        params: Mapping[str, Any] | None = None,
        *,
        response_format: ResponseFormat | str | None = None,
    ) -> Any:
        """Run one operation.

        Args:
            family: Resource family (e.g. "projects")
            operation: Operation name (e.g. "list", "get-phase-schedule")
            params: Operation parameters
            response_format: json, xml or csv (downgraded to json)

        Raises:
            ValidationError: Unknown operation or invalid parameters
            UpstreamError: The service rejected the call or was unreachable
        """
        if self._closed:
            raise RuntimeError("FloatAPI is closed")
        return await self._router.route(
            family, operation, params, response_format=response_format
        )

    # --- Lifecycle -----------------------------------------------------------

    async def close(self) -> None:
        """Stop the admission sweep and close the HTTP session."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing FloatAPI")
        await self._admission.shutdown()
        if self._owns_http:
            await self._http.close()

    async def __aenter__(self) -> FloatAPI:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
