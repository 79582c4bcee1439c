"""Product Browser data models."""

from product_browser.models.product import Product, COLUMNS, COLUMN_KEYS
from product_browser.models.pagination import Page, total_pages
from product_browser.models.table_state import TableSort, TableFilters, Paginator

__all__ = [
    "Product",
    "COLUMNS",
    "COLUMN_KEYS",
    "Page",
    "total_pages",
    "TableSort",
    "TableFilters",
    "Paginator",
]
