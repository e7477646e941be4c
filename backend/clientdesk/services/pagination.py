"""Pagination arithmetic for the clients list."""

from __future__ import annotations

import math


def total_pages(row_count: int, page_size: int) -> int:
    """Number of pages needed for ``row_count`` rows; zero rows means zero pages."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(row_count / page_size)


def page_range(page: int, page_size: int) -> tuple[int, int]:
    """Inclusive ``(first, last)`` row offsets for a 1-based page number."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    start = (page - 1) * page_size
    return start, page * page_size - 1


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))
