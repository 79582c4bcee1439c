# product_browser/paging/events.py

from enum import Enum


class EventType(Enum):
    # Fetch lifecycle
    PAGE_REQUESTED = "page_requested"
    PAGE_LOADED = "page_loaded"
    PAGE_DISCARDED = "page_discarded"
    PAGE_FAILED = "page_failed"

    # Cache maintenance
    PAGES_EVICTED = "pages_evicted"
    CACHE_RESET = "cache_reset"


class DiscardReason(Enum):
    STALE_EPOCH = "stale_epoch"      # parameters changed while the request was out
    OUT_OF_RANGE = "out_of_range"    # scrolled away before the response landed
