"""
Custom DataTable widget for displaying products
"""

from typing import Iterable, Optional

from rich.text import Text
from textual.message import Message
from textual.widgets import DataTable

from product_browser.models.product import COLUMNS, Product
from product_browser.models.table_state import TableSort
from product_browser.utils.formatters import product_cells

NUMERIC_COLUMNS = {"price", "quantity_in_stock", "weight"}


class ProductTable(DataTable):
    """
    DataTable for product listings; clicking a column header asks for a sort
    """

    class SortRequested(Message):
        """Header clicked"""
        def __init__(self, column: str) -> None:
            super().__init__()
            self.column = column

    def __init__(
        self,
        *,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        """
        Initialize the ProductTable

        Args:
            id: Optional widget ID
            classes: Optional CSS classes
        """
        super().__init__(id=id, classes=classes)
        self.cursor_type = "row"
        self.zebra_stripes = True

    def on_mount(self) -> None:
        """Set up the widget when mounted"""
        self.add_class("products-table")

    def show_products(self, products: Iterable[Product], sort: TableSort) -> None:
        """Replace columns (with sort markers) and rows."""
        self.clear(columns=True)
        for key, label in COLUMNS:
            marker = sort.marker(key)
            self.add_column(f"{label} {marker}" if marker else label, key=key)

        keys = [key for key, _ in COLUMNS]
        for product in products:
            cells = product_cells(product, keys)
            self.add_row(
                *[
                    Text(cell, justify="right") if key in NUMERIC_COLUMNS else cell
                    for key, cell in zip(keys, cells)
                ],
                key=product.product_id,
            )

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        """
        Forward header clicks as a sort request

        Args:
            event: DataTable header selected event
        """
        event.stop()
        self.post_message(self.SortRequested(event.column_key.value))
