# product_browser/paging/window.py
"""
Window arithmetic for the on-demand table.

Pure functions only: the visible row range goes in, page numbers come out.
`total_pages=None` means the total is not known yet (no response has landed
under the current parameters), so nothing can be clamped from above.
"""

from typing import FrozenSet, Iterable, Optional, Tuple

# pages requested at most while the total is unknown; the first response
# sets the total and the window is recomputed
UNKNOWN_TOTAL_PAGE_LIMIT = 3


def page_for_index(index: int, page_size: int) -> int:
    """1-based page holding row `index` (0-based)."""
    return index // page_size + 1


def page_span(start_index: int, stop_index: int, page_size: int) -> Tuple[int, int]:
    """
    First and last page touched by the inclusive row range.

    Negative starts are treated as 0 and a stop before the start collapses
    the range onto the start row.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    start_index = max(0, start_index)
    stop_index = max(start_index, stop_index)
    return page_for_index(start_index, page_size), page_for_index(stop_index, page_size)


def compute_target_pages(
    start_index: int,
    stop_index: int,
    page_size: int,
    total_pages: Optional[int],
    prefetch_pages: int = 1,
) -> FrozenSet[int]:
    """
    Pages that should be resident for the visible range: the visible pages
    plus `prefetch_pages` of look-ahead on each side, clamped to
    1..total_pages.

    With an unknown total there is no look-ahead past the visible pages and
    at most UNKNOWN_TOTAL_PAGE_LIMIT pages from `start_page` are targeted.
    """
    start_page, end_page = page_span(start_index, stop_index, page_size)
    first = max(1, start_page - prefetch_pages)
    if total_pages is None:
        last = min(end_page, start_page + UNKNOWN_TOTAL_PAGE_LIMIT - 1)
    else:
        last = min(total_pages, end_page + prefetch_pages)
    return frozenset(range(first, last + 1))


def compute_keep_range(
    start_page: int,
    end_page: int,
    buffer_pages: int,
    total_pages: Optional[int],
) -> Tuple[int, int]:
    """Inclusive page interval a resident page must fall within to survive."""
    keep_min = max(1, start_page - buffer_pages)
    keep_max = end_page + buffer_pages
    if total_pages is not None:
        keep_max = min(total_pages, keep_max)
    return keep_min, keep_max


def compute_evictions(resident: Iterable[int], keep_min: int, keep_max: int) -> FrozenSet[int]:
    """Every resident page outside [keep_min, keep_max]."""
    return frozenset(p for p in resident if p < keep_min or p > keep_max)


def in_range(page: int, keep_range: Tuple[int, int]) -> bool:
    keep_min, keep_max = keep_range
    return keep_min <= page <= keep_max
