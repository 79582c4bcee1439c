# product_browser/ui/screens/on_demand_screen.py
"""
On-demand products screen: a virtualized list that fetches pages around the
viewport as the user scrolls.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from product_browser.di import Container
from product_browser.models.table_state import build_params
from product_browser.paging.events import EventType
from product_browser.ui.controllers.status_bar import StatusBarController
from product_browser.ui.messages import PageCacheChanged
from product_browser.ui.mixins.table_controls_mixin import TableControlsMixin
from product_browser.ui.widgets.filter_bar import FilterBar
from product_browser.ui.widgets.virtual_product_list import VirtualProductList
from simple_logger import Slogger


class OnDemandScreen(TableControlsMixin, Screen):
    """Rows are fetched a page at a time; far-away pages are dropped."""

    TITLE = "Products - On Demand"
    AUTO_FOCUS = "#virtual-list"

    BINDINGS = [
        Binding("escape", "focus_table", "List", show=False),
        Binding("r", "reload", "Reload", show=True),
    ]

    def __init__(self, container: Container, *, id: str = "on_demand_screen") -> None:
        super().__init__(id=id)
        self.container = container
        self.config = container.config
        self._init_table_controls()

        self.loader = container.page_loader(
            params=build_params(self.sort, self.filters),
            spawn=self._spawn_fetch,
        )
        self.loader.event_bus.subscribe_all(self._on_loader_event)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="content-area"):
            yield FilterBar(
                debounce_ms=self.config.get("ui", {}).get("filter_debounce_ms", 300),
                id="filter-bar",
            )
            yield VirtualProductList(self.loader, self.sort, id="virtual-list")
        yield Static(id="status-bar", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.status_controller = StatusBarController(self.query_one("#status-bar", Static))
        Slogger.debug("On-demand view mounted", {
            **self.container.product_service.describe(),
            "page_size": self.loader.page_size,
            "prefetch_pages": self.loader.prefetch_pages,
            "buffer_pages": self.loader.buffer_pages,
        })
        self._update_status()

    def on_unmount(self) -> None:
        self.loader.event_bus.clear()

    # ------------------------------------------------------------------ #
    # Loader wiring
    # ------------------------------------------------------------------ #

    def _spawn_fetch(self, coro) -> None:
        # workers share the app's event loop, so loader state is never touched concurrently
        self.run_worker(coro, group="page-fetch", exit_on_error=False)

    def _on_loader_event(
        self,
        event_type: str,
        event_enum: EventType,
        page: Optional[int] = None,
        **data: Any,
    ) -> None:
        if event_enum is EventType.PAGE_FAILED:
            Slogger.warning(
                "Page fetch failed",
                {"page": page, "epoch": data.get("epoch"), "error": data.get("error")},
            )
        self.post_message(PageCacheChanged(event_type, self.loader.snapshot(), page))

    def on_page_cache_changed(self, message: PageCacheChanged) -> None:
        self.query_one(VirtualProductList).refresh_rows()
        self._update_status(message.snapshot)

    # ------------------------------------------------------------------ #
    # Event handlers
    # ------------------------------------------------------------------ #

    def on_virtual_product_list_sort_requested(self, event: VirtualProductList.SortRequested) -> None:
        self.apply_sort(event.column)

    def on_table_controls_changed(self) -> None:
        product_list = self.query_one(VirtualProductList)
        # new epoch first: scrolling to the top reports a visible range at once
        issued = self.loader.on_parameters_changed(build_params(self.sort, self.filters))
        product_list.reset_scroll()
        Slogger.debug(
            "Query parameters changed",
            {"epoch": self.loader.epoch, "params": self.loader.params, "issued": sorted(issued)},
        )
        product_list.refresh_rows()
        self._update_status()

    def action_reload(self) -> None:
        self.loader.invalidate()
        self.query_one(VirtualProductList).refresh_rows()
        self._update_status()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _update_status(self, snapshot: Optional[Dict[str, Any]] = None) -> None:
        if not hasattr(self, "status_controller"):
            return
        self.status_controller.update_on_demand(
            snapshot or self.loader.snapshot(), self.sort, self.filters.active()
        )
