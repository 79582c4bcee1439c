# product_browser/di.py
"""
Very small dependency-injection helper.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from product_browser.db.connection import SQLiteConnection
from product_browser.db.repos.product_repo import ProductRepo
from product_browser.interfaces.query_service import QueryParams
from product_browser.paging.event_bus import EventBus
from product_browser.paging.loader import PageLoader, Spawner
from product_browser.services.product_service import ProductService


class Container:
    """Holds lazily-created singletons."""

    def __init__(self, config: Dict[str, Any]) -> None:
        self._cfg = config
        self._db: SQLiteConnection | None = None
        self._product_repo: ProductRepo | None = None
        self._product_service: ProductService | None = None

    @property
    def config(self) -> Dict[str, Any]:
        return self._cfg

    # ---------- infra ----------
    @property
    def db(self) -> SQLiteConnection:
        if self._db is None:
            self._db = SQLiteConnection(self._cfg)
        return self._db

    # ---------- repositories ----------
    @property
    def product_repo(self) -> ProductRepo:
        if self._product_repo is None:
            self._product_repo = ProductRepo(self.db)
        return self._product_repo

    # ---------- services ----------
    @property
    def product_service(self) -> ProductService:
        if self._product_service is None:
            self._product_service = ProductService(
                self.product_repo,
                default_page_size=self._cfg.get("ui", {}).get("per_page", 25),
                latency_ms=self._cfg.get("api", {}).get("latency_ms", 0),
            )
        return self._product_service

    # ---------- paging ----------
    def page_loader(
        self,
        *,
        params: Optional[QueryParams] = None,
        spawn: Optional[Spawner] = None,
    ) -> PageLoader:
        """A fresh loader per screen; loaders are not shared."""
        on_demand = self._cfg.get("on_demand", {})
        return PageLoader(
            self.product_service,
            page_size=on_demand.get("page_size", 50),
            prefetch_pages=on_demand.get("prefetch_pages", 1),
            buffer_pages=on_demand.get("buffer_pages", 2),
            params=params,
            event_bus=EventBus(),
            spawn=spawn,
        )

    def seed(self) -> int:
        dataset = self._cfg.get("dataset", {})
        return self.product_service.ensure_seeded(
            rows=dataset.get("rows", 10000),
            seed=dataset.get("seed", 42),
        )

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None


# convenience factory
def build_container(config: Dict[str, Any]) -> Container:
    """Create a container for the given config."""
    return Container(config)
