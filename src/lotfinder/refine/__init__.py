"""Client-side refinement of a result collection: filtering and paging."""

from lotfinder.refine.filters import apply_filters, available_options
from lotfinder.refine.pagination import clamp_page, page_count, paginate

__all__ = [
    "apply_filters",
    "available_options",
    "clamp_page",
    "page_count",
    "paginate",
]
