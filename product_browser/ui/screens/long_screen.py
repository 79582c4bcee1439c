# product_browser/ui/screens/long_screen.py
"""
Long products screen: every row loaded at once, filtered client-side
"""

from __future__ import annotations

from typing import Any, Dict, List

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from product_browser.errors import QueryError
from product_browser.models.product import Product
from product_browser.services.product_service import ProductService
from product_browser.ui.controllers.status_bar import StatusBarController
from product_browser.ui.mixins.table_controls_mixin import TableControlsMixin
from product_browser.ui.widgets.filter_bar import FilterBar
from product_browser.ui.widgets.product_table import ProductTable
from simple_logger import Slogger


class LongScreen(TableControlsMixin, Screen):
    """No pagination at all: the whole table in one DataTable."""

    TITLE = "Products - Long"
    AUTO_FOCUS = "#products-table"

    BINDINGS = [
        Binding("escape", "focus_table", "Table", show=False),
    ]

    def __init__(
        self,
        product_service: ProductService,
        config: Dict[str, Any],
        *,
        id: str = "long_screen",
    ) -> None:
        super().__init__(id=id)
        self.config = config
        self.product_service = product_service
        self._init_table_controls()
        # rows for the current sort; filters never refetch
        self.products: List[Product] = []
        self._loaded_sort = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="content-area"):
            yield FilterBar(
                debounce_ms=self.config.get("ui", {}).get("filter_debounce_ms", 300),
                id="filter-bar",
            )
            yield ProductTable(id="products-table")
        yield Static(id="status-bar", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.status_controller = StatusBarController(self.query_one("#status-bar", Static))
        self.load_products()

    def on_product_table_sort_requested(self, event: ProductTable.SortRequested) -> None:
        self.apply_sort(event.column)

    def on_table_controls_changed(self) -> None:
        self.load_products()

    def load_products(self) -> None:
        """Refetch only when the sort changed, then filter in memory."""
        sort_key = (self.sort.sort_by, self.sort.sort_order)
        if sort_key != self._loaded_sort:
            try:
                self.products = self.product_service.all(
                    sort_by=self.sort.sort_by, sort_order=self.sort.sort_order
                )
            except QueryError as e:
                Slogger.exception(e, "Loading all products failed", {"screen": "LongScreen"})
                self.notify(f"Could not load products: {e}", severity="error", timeout=5)
                return
            self._loaded_sort = sort_key

        shown = self.filters.apply(self.products)
        self.query_one(ProductTable).show_products(shown, self.sort)
        self.status_controller.update_long(len(shown), len(self.products), self.sort, self.filters.active())
