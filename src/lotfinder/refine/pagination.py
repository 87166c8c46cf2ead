"""Fixed-size paging of an ordered collection."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def page_count(total_items: int, page_size: int) -> int:
    """Number of pages needed for *total_items*; ``0`` for an empty collection."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total_items <= 0:
        return 0
    return math.ceil(total_items / page_size)


def paginate(items: Sequence[T], page_size: int, page_number: int) -> Sequence[T]:
    """Items on 1-based *page_number*.

    Pages past the end (or below 1) are empty; callers clamp navigation.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page_number < 1:
        return items[0:0]
    start = (page_number - 1) * page_size
    return items[start : start + page_size]


def clamp_page(page_number: int, total_pages: int) -> int:
    return max(1, min(page_number, max(total_pages, 1)))
