# product_browser/ui/screens/paginated_screen.py
"""
Paginated products screen: one server-side page at a time
"""

from __future__ import annotations

from typing import Any, Dict

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from product_browser.errors import QueryError
from product_browser.models.pagination import Page
from product_browser.models.product import Product
from product_browser.models.table_state import Paginator
from product_browser.services.product_service import ProductService
from product_browser.ui.controllers.status_bar import StatusBarController
from product_browser.ui.mixins.table_controls_mixin import TableControlsMixin
from product_browser.ui.widgets.filter_bar import FilterBar
from product_browser.ui.widgets.pagination import Pagination
from product_browser.ui.widgets.product_table import ProductTable
from simple_logger import Slogger


class PaginatedScreen(TableControlsMixin, Screen):
    """Classic pagination with a page-size selector."""

    TITLE = "Products - Paginated"
    AUTO_FOCUS = "#products-table"

    BINDINGS = [
        Binding("escape", "focus_table", "Table", show=False),
        Binding("n", "next_page", "Next Page", show=True),
        Binding("p", "prev_page", "Prev Page", show=True),
    ]

    def __init__(
        self,
        product_service: ProductService,
        config: Dict[str, Any],
        *,
        id: str = "paginated_screen",
    ) -> None:
        super().__init__(id=id)
        self.config = config
        self.product_service = product_service
        self._init_table_controls()
        self.paginator = Paginator(page_size=config.get("ui", {}).get("per_page", 25))

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="content-area"):
            yield FilterBar(
                debounce_ms=self.config.get("ui", {}).get("filter_debounce_ms", 300),
                id="filter-bar",
            )
            yield ProductTable(id="products-table")
            yield Pagination(page_size=self.paginator.page_size, id="pagination")
        yield Static(id="status-bar", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.status_controller = StatusBarController(self.query_one("#status-bar", Static))
        self.load_products()

    # ------------------------------------------------------------------ #
    # Action handlers
    # ------------------------------------------------------------------ #

    def action_next_page(self) -> None:
        if self.paginator.next():
            self.load_products()

    def action_prev_page(self) -> None:
        if self.paginator.prev():
            self.load_products()

    # ------------------------------------------------------------------ #
    # Event handlers
    # ------------------------------------------------------------------ #

    def on_product_table_sort_requested(self, event: ProductTable.SortRequested) -> None:
        self.apply_sort(event.column)

    def on_pagination_page_changed(self, event: Pagination.PageChanged) -> None:
        if self.paginator.page != event.page:
            self.paginator.page = event.page
            self.load_products()

    def on_pagination_page_size_changed(self, event: Pagination.PageSizeChanged) -> None:
        self.paginator.set_page_size(event.page_size)
        self.load_products()

    def on_table_controls_changed(self) -> None:
        self.paginator.reset()
        self.load_products()

    # ------------------------------------------------------------------ #
    # Data helpers
    # ------------------------------------------------------------------ #

    def load_products(self) -> None:
        """Fetch the current page from the service and refresh UI widgets."""
        try:
            page_obj: Page[Product] = self.product_service.page(
                page=self.paginator.page,
                per_page=self.paginator.page_size,
                sort_by=self.sort.sort_by,
                sort_order=self.sort.sort_order,
                filters=self.filters.active(),
            )
        except QueryError as e:
            Slogger.exception(e, "Loading products page failed", {"screen": "PaginatedScreen"})
            self.notify(f"Could not load products: {e}", severity="error", timeout=5)
            return

        self.paginator.total = page_obj.total

        self.query_one(ProductTable).show_products(page_obj.items, self.sort)
        self.query_one(Pagination).update_from(self.paginator)
        self.status_controller.update_paginated(self.paginator, self.sort, self.filters.active())
