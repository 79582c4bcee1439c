# product_browser/services/product_service.py
"""
Business-logic layer for products. Works with domain models and Page container,
and serves as the paged query service behind the on-demand view.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Dict, List, Mapping, Optional

from product_browser.data.generator import DEFAULT_ROW_COUNT, DEFAULT_SEED, iter_products
from product_browser.db.repos.product_repo import ProductRepo
from product_browser.interfaces.query_service import QueryParams, QueryResult, QueryServiceInterface
from product_browser.models.pagination import Page, total_pages
from product_browser.models.product import Product
from simple_logger import Slogger


class ProductService(QueryServiceInterface[Product]):
    """Handles all product-related use-cases."""

    def __init__(
        self,
        product_repo: ProductRepo,
        *,
        default_page_size: int = 25,
        latency_ms: int = 0,
    ) -> None:
        self._products = product_repo
        self._per_page = default_page_size
        self._latency = max(0, latency_ms) / 1000.0
        # one connection shared by the UI thread and query() worker threads
        self._lock = threading.Lock()

    # --------------------------------------------------------------------- #
    # read side
    # --------------------------------------------------------------------- #

    def page(
        self,
        *,
        page: int = 1,
        per_page: int | None = None,
        sort_by: str = "product_id",
        sort_order: str = "asc",
        filters: Mapping[str, str] | None = None,
    ) -> Page[Product]:
        """Return a Page of Product models filtered / sorted / paginated."""
        per_page = per_page or self._per_page

        with self._lock:
            items = self._products.list(
                page=page,
                per_page=per_page,
                filters=filters,
                sort_by=sort_by,
                sort_order=sort_order,
            )
            total = self._products.count(filters)
        pages = max(1, total_pages(total, per_page))

        return Page(items=items, total=total, pages=pages, page=page, per_page=per_page)

    def all(self, *, sort_by: str = "product_id", sort_order: str = "asc") -> List[Product]:
        """Every product in the given order (the 'long' view filters client-side)."""
        with self._lock:
            return self._products.all(sort_by=sort_by, sort_order=sort_order)

    def by_id(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.by_id(product_id)

    async def query(self, page: int, page_size: int, params: QueryParams) -> QueryResult[Product]:
        """
        Fetch one page for the on-demand view, after the simulated network delay.

        The SQLite work runs in a worker thread so the event loop keeps
        drawing while a page loads.
        """
        if self._latency:
            await asyncio.sleep(self._latency)

        result = await asyncio.to_thread(
            self.page,
            page=page,
            per_page=page_size,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
            filters=params.filter_map,
        )
        return QueryResult(rows=tuple(result.items), total=result.total)

    def describe(self) -> Dict[str, Any]:
        return {
            "source": "sqlite",
            "latency_ms": int(self._latency * 1000),
            "default_page_size": self._per_page,
        }

    # --------------------------------------------------------------------- #
    # write side
    # --------------------------------------------------------------------- #

    def ensure_seeded(self, *, rows: int = DEFAULT_ROW_COUNT, seed: int = DEFAULT_SEED) -> int:
        """Populate an empty database from the generator; returns rows inserted."""
        with self._lock:
            if not self._products.is_empty():
                return 0
            Slogger.info("Seeding product table", {"rows": rows, "seed": seed})
            return self._products.bulk_insert(iter_products(rows, seed))

    def reseed(self, *, rows: int = DEFAULT_ROW_COUNT, seed: int = DEFAULT_SEED) -> int:
        """Drop every product and regenerate the dataset."""
        with self._lock:
            self._products.delete_all()
        return self.ensure_seeded(rows=rows, seed=seed)
