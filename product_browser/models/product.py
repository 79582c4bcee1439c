"""Domain model for a Product row."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

STATUSES: Tuple[str, ...] = ("in stock", "out of stock", "discontinued")

# (key, label) in display order
COLUMNS: List[Tuple[str, str]] = [
    ("product_id", "Product ID"),
    ("product_name", "Product Name"),
    ("category", "Category"),
    ("price", "Price (€)"),
    ("quantity_in_stock", "Stock"),
    ("supplier_name", "Supplier"),
    ("date_added", "Date Added"),
    ("location", "Location"),
    ("weight", "Weight (kg)"),
    ("status", "Status"),
]

COLUMN_KEYS: Tuple[str, ...] = tuple(key for key, _ in COLUMNS)


@dataclass(frozen=True, slots=True)
class Product:
    product_id: str
    product_name: str
    category: str
    price: float
    quantity_in_stock: int
    supplier_name: str
    date_added: str          # ISO date, YYYY-MM-DD
    location: str
    weight: float
    status: str

    # ---------- mappings ----------
    @classmethod
    def from_sqlite(cls, row: Dict[str, Any]) -> Optional["Product"]:
        """Build a `Product` from a SQLite row (dict)."""
        if not row:
            return None

        return cls(
            product_id=str(row.get("product_id", "")),
            product_name=row.get("product_name", ""),
            category=row.get("category", ""),
            price=float(row.get("price") or 0.0),
            quantity_in_stock=int(row.get("quantity_in_stock") or 0),
            supplier_name=row.get("supplier_name", ""),
            date_added=row.get("date_added", ""),
            location=row.get("location", ""),
            weight=float(row.get("weight") or 0.0),
            status=row.get("status", ""),
        )

    def to_sqlite(self) -> Dict[str, Any]:
        """Convert to SQLite-ready dict."""
        return asdict(self)

    def value(self, column: str) -> Any:
        """Raw value of a column by key."""
        if column not in COLUMN_KEYS:
            raise KeyError(column)
        return getattr(self, column)

    def text(self, column: str) -> str:
        """
        Text form of a column, as used by substring filters.

        Floats print the way the data source stores them (`12.5`, not
        `12.50`) so that client-side and server-side filtering agree.
        """
        value = self.value(column)
        if isinstance(value, float):
            return repr(value)
        return str(value)
