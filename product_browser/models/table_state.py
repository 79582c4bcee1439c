"""Sort, filter and pagination state shared by the table screens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from product_browser.interfaces.query_service import QueryParams
from product_browser.models.pagination import total_pages
from product_browser.models.product import Product

PAGE_SIZE_CHOICES = (10, 25, 50, 100)


@dataclass
class TableSort:
    """Current sort column and direction."""

    sort_by: str = "product_id"
    sort_order: str = "asc"

    def toggle(self, column: str) -> None:
        """Same column flips the order; a new column starts ascending."""
        if column == self.sort_by:
            self.sort_order = "desc" if self.sort_order == "asc" else "asc"
        else:
            self.sort_by = column
            self.sort_order = "asc"

    def marker(self, column: str) -> str:
        if column != self.sort_by:
            return ""
        return "▲" if self.sort_order == "asc" else "▼"


@dataclass
class TableFilters:
    """Per-column substring filters, as typed by the user."""

    values: Dict[str, str] = field(default_factory=dict)

    def set(self, column: str, value: str) -> None:
        self.values[column] = value

    def clear(self) -> None:
        self.values.clear()

    def active(self) -> Dict[str, str]:
        return {k: v for k, v in self.values.items() if v}

    def matches(self, row: Product) -> bool:
        """Case-insensitive substring match on every active column."""
        for column, needle in self.active().items():
            if needle.lower() not in row.text(column).lower():
                return False
        return True

    def apply(self, rows: Iterable[Product]) -> List[Product]:
        if not self.active():
            return list(rows)
        return [row for row in rows if self.matches(row)]


def build_params(sort: TableSort, filters: Optional[TableFilters] = None) -> QueryParams:
    return QueryParams.build(
        sort_by=sort.sort_by,
        sort_order=sort.sort_order,
        filters=filters.active() if filters else None,
    )


@dataclass
class Paginator:
    """Page number and page size for the classic paginated view."""

    page: int = 1
    page_size: int = 25
    total: int = 0

    def reset(self) -> None:
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        self.page_size = page_size
        self.page = 1

    @property
    def pages(self) -> int:
        return max(1, total_pages(self.total, self.page_size))

    def has_prev(self) -> bool:
        return self.page > 1

    def has_next(self) -> bool:
        return self.page * self.page_size < self.total

    def next(self) -> bool:
        if not self.has_next():
            return False
        self.page += 1
        return True

    def prev(self) -> bool:
        if not self.has_prev():
            return False
        self.page -= 1
        return True

    def showing(self) -> str:
        """'Showing a-b of n' text."""
        first = min((self.page - 1) * self.page_size + 1, self.total)
        last = min(self.page * self.page_size, self.total)
        return f"Showing {first}-{last} of {self.total}"
