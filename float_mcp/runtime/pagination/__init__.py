"""Pagination layer for list endpoints.

Architecture:
    - definitions.py: PagePolicy, PagePlan and PageResult
    - aggregator.py: PaginationAggregator (drives pages, detects the terminal page)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .aggregator import PaginationAggregator
from .definitions import PAGE_PARAM, PER_PAGE_PARAM, PagePlan, PagePolicy, PageResult

__all__ = [
    "PAGE_PARAM",
    "PER_PAGE_PARAM",
    "PagePlan",
    "PagePolicy",
    "PageResult",
    "PaginationAggregator",
]
