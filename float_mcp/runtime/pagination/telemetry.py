"""Structured logging for pagination runs."""

from __future__ import annotations

import logging

from .definitions import PagePlan, PageResult

logger = logging.getLogger(__name__)


def log_page_plan(*, path: str, plan: PagePlan) -> None:
    """Log the plan derived from caller filters."""
    logger.debug(
        "page_plan_created",
        extra={
            "path": path,
            "start_page": plan.start_page,
            "per_page": plan.per_page,
            "single_page": plan.single_page,
        },
    )


def log_page_completed(
    *,
    path: str,
    page: int,
    items: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single page.

    Args:
        path: Endpoint path
        page: Page number fetched
        items: Number of items the page contained
        latency_ms: Latency in milliseconds (optional)
    """
    logger.debug(
        "page_completed",
        extra={"path": path, "page": page, "items": items, "latency_ms": latency_ms},
    )


def log_pagination_complete(
    *,
    path: str,
    result: PageResult,
    total_latency_ms: float | None = None,
) -> None:
    logger.info(
        "pagination_complete",
        extra={
            "path": path,
            "pages_fetched": result.pages_fetched,
            "total_items": result.total_items,
            "single_page": result.single_page,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_page_error(*, path: str, page: int, error_type: str, error_message: str) -> None:
    """Log a failed page fetch.

    Args:
        path: Endpoint path
        page: Page number that failed
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "page_error",
        extra={
            "path": path,
            "page": page,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
