# product_browser/ui/messages.py
"""Message classes for the application."""

from __future__ import annotations

from typing import Any, Dict, Optional

from textual.message import Message


class PageCacheChanged(Message):
    """The on-demand page cache changed (page loaded, evicted, reset...)."""

    def __init__(self, event_type: str, snapshot: Dict[str, Any], page: Optional[int] = None) -> None:
        """Initialize with the loader counters at the time of the change."""
        super().__init__()
        self.event_type = event_type
        self.snapshot = snapshot
        self.page = page
