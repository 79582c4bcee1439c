"""On-demand windowed page cache behind the virtualized product list."""

from product_browser.paging.event_bus import EventBus
from product_browser.paging.events import DiscardReason, EventType
from product_browser.paging.loader import PageLoader
from product_browser.paging.page_cache import Loaded, PageCache, Pending, PendingSlot, RowSlot, assemble_visible_rows
from product_browser.paging.window import (
    compute_evictions,
    compute_keep_range,
    compute_target_pages,
    page_span,
)

__all__ = [
    "EventBus",
    "EventType",
    "DiscardReason",
    "PageLoader",
    "PageCache",
    "Loaded",
    "Pending",
    "PendingSlot",
    "RowSlot",
    "assemble_visible_rows",
    "compute_evictions",
    "compute_keep_range",
    "compute_target_pages",
    "page_span",
]
