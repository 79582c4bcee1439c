# product_browser/db/repos/product_repo.py
"""
Repository for product rows. Returns/accepts `Product` domain models.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple

from product_browser.db.connection import SQLiteConnection
from product_browser.errors import QueryError
from product_browser.models.product import COLUMN_KEYS, Product
from simple_logger import Slogger

LIKE_ESCAPE = "\\"


def _like_pattern(needle: str) -> str:
    """Wrap `needle` in % after escaping LIKE wildcards."""
    escaped = (
        needle.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class ProductRepo:
    """Read/write access for Product records."""

    def __init__(self, db: SQLiteConnection, table_name: str = "products") -> None:
        self._db = db
        self._table = table_name

    # ---------- read side --------------------------------------------------

    def list(
        self,
        *,
        page: int = 1,
        per_page: int = 25,
        filters: Mapping[str, str] | None = None,
        sort_by: str = "product_id",
        sort_order: str = "asc",
    ) -> List[Product]:
        """Return a page of products as `Product` models."""
        if page < 1:
            raise QueryError(f"Page must be >= 1, got {page}")
        if per_page <= 0:
            raise QueryError(f"Page size must be > 0, got {per_page}")

        where, params = self._where(filters)
        query = f"SELECT * FROM {self._table}{where}{self._order_by(sort_by, sort_order)} LIMIT ? OFFSET ?"
        params.extend([per_page, (page - 1) * per_page])

        cursor = self._db.cursor()
        cursor.execute(query, params)
        results = cursor.fetchall()

        Slogger.debug(
            f"ProductRepo.list: Retrieved {len(results)} products",
            {"page": page, "per_page": per_page, "sort": f"{sort_by} {sort_order}", "filters": dict(filters or {})},
        )
        return [Product.from_sqlite(dict(row)) for row in results]

    def count(self, filters: Mapping[str, str] | None = None) -> int:
        """Total products matching filters."""
        where, params = self._where(filters)
        cursor = self._db.cursor()
        cursor.execute(f"SELECT COUNT(*) FROM {self._table}{where}", params)
        return cursor.fetchone()[0]

    def all(self, *, sort_by: str = "product_id", sort_order: str = "asc") -> List[Product]:
        """Every product, sorted. No filtering."""
        cursor = self._db.cursor()
        cursor.execute(f"SELECT * FROM {self._table}{self._order_by(sort_by, sort_order)}")
        results = cursor.fetchall()
        Slogger.debug(f"ProductRepo.all: Retrieved {len(results)} products", {"sort": f"{sort_by} {sort_order}"})
        return [Product.from_sqlite(dict(row)) for row in results]

    def by_id(self, product_id: str) -> Optional[Product]:
        """Find a product by its product_id and return a model (or None)."""
        cursor = self._db.cursor()
        cursor.execute(f"SELECT * FROM {self._table} WHERE product_id = ?", (product_id,))
        row = cursor.fetchone()
        if row:
            return Product.from_sqlite(dict(row))
        Slogger.debug(f"ProductRepo.by_id: No product found with product_id={product_id}")
        return None

    def is_empty(self) -> bool:
        cursor = self._db.cursor()
        cursor.execute(f"SELECT 1 FROM {self._table} LIMIT 1")
        return cursor.fetchone() is None

    # ---------- write side -------------------------------------------------

    def bulk_insert(self, products: Iterable[Product]) -> int:
        """Insert many products in one transaction; returns the number inserted."""
        docs = [p.to_sqlite() for p in products]
        if not docs:
            return 0

        fields = ", ".join(COLUMN_KEYS)
        placeholders = ", ".join(["?"] * len(COLUMN_KEYS))
        values = [tuple(doc[key] for key in COLUMN_KEYS) for doc in docs]

        cursor = self._db.cursor()
        cursor.executemany(
            f"INSERT OR IGNORE INTO {self._table} ({fields}) VALUES ({placeholders})",
            values,
        )
        self._db.commit()

        Slogger.info(f"ProductRepo.bulk_insert: Inserted {cursor.rowcount} of {len(values)} products")
        return cursor.rowcount

    def delete_all(self) -> None:
        cursor = self._db.cursor()
        cursor.execute(f"DELETE FROM {self._table}")
        self._db.commit()
        Slogger.info("ProductRepo.delete_all: Removed every product")

    # ---------- helpers ----------------------------------------------------

    @staticmethod
    def _where(filters: Mapping[str, str] | None) -> Tuple[str, list]:
        clauses = []
        params: list = []
        for column, needle in (filters or {}).items():
            if not needle:
                continue
            if column not in COLUMN_KEYS:
                raise QueryError(f"Unknown filter column: {column}")
            clauses.append(f"CAST({column} AS TEXT) LIKE ? ESCAPE '{LIKE_ESCAPE}'")
            params.append(_like_pattern(needle))
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    @staticmethod
    def _order_by(sort_by: str, sort_order: str) -> str:
        if sort_by not in COLUMN_KEYS:
            raise QueryError(f"Unknown sort column: {sort_by}")
        if sort_order not in ("asc", "desc"):
            raise QueryError(f"Sort order must be 'asc' or 'desc', got {sort_order!r}")
        # ties keep insertion order whatever the direction
        return f" ORDER BY {sort_by} {sort_order.upper()}, id ASC"
