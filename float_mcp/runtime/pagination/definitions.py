"""Pagination policy and result structures.

This module defines the data structures used to describe how list endpoints
are paged: the per-service policy, the plan derived from caller filters and
the aggregated result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PAGE_PARAM = "page"
PER_PAGE_PARAM = "per-page"


@dataclass(frozen=True)
class PagePolicy:
    """Paging limits of the remote service.

    Attributes:
        default_page_size: Page size used when the caller gives none
        max_page_size: Largest page size the service accepts
        max_pages: Safety cap on pages fetched in one aggregation
    """

    default_page_size: int = 50
    max_page_size: int = 200
    max_pages: int = 1000

    def __post_init__(self) -> None:
        if self.default_page_size < 1 or self.max_page_size < 1 or self.max_pages < 1:
            raise ValueError("page policy values must be positive")
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")


@dataclass(frozen=True)
class PagePlan:
    """Where an aggregation starts and how it proceeds.

    Attributes:
        start_page: First page number requested (>= 1)
        per_page: Items requested per page (<= policy.max_page_size)
        single_page: True when the caller pinned both page and per-page
    """

    start_page: int
    per_page: int
    single_page: bool


@dataclass
class PageResult:
    """Aggregated items plus fetch metadata."""

    items: list[Any]
    pages_fetched: int
    single_page: bool = False

    @property
    def total_items(self) -> int:
        return len(self.items)
