# product_browser/ui/controllers/status_bar.py
"""Formats and updates the status bar."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from textual.widgets import Static

from product_browser.models.table_state import Paginator, TableSort


class StatusBarController:
    """Builds the human-readable status text and writes it to the bar."""

    def __init__(self, status_bar: Static) -> None:
        self._bar = status_bar
        self.text = ""

    # ------------------------------------------------------------------ #
    # public helpers
    # ------------------------------------------------------------------ #

    def update_paginated(self, paginator: Paginator, sort: TableSort, filters: Mapping[str, str]) -> None:
        parts = [
            f"Products: {paginator.total}",
            f"Page: {paginator.page}/{paginator.pages}",
        ]
        self._write(parts, sort, filters)

    def update_on_demand(self, snapshot: Dict[str, Any], sort: TableSort, filters: Mapping[str, str]) -> None:
        """
        Refresh the line for the on-demand view.

        `snapshot` expected keys (PageLoader.snapshot()):
            total, total_pages, loaded_pages, in_flight
        """
        parts = [
            f"Loaded: {snapshot.get('loaded_pages', 0)} of {snapshot.get('total_pages', 0)} pages "
            f"({snapshot.get('total', 0)} items)",
        ]
        if snapshot.get("in_flight"):
            parts.append(f"Fetching: {snapshot['in_flight']}")
        self._write(parts, sort, filters)

    def update_long(self, shown: int, total: int, sort: TableSort, filters: Mapping[str, str]) -> None:
        self._write([f"Showing {shown} of {total} products"], sort, filters)

    # ------------------------------------------------------------------ #
    # internals
    # ------------------------------------------------------------------ #

    def _write(self, parts: list, sort: TableSort, filters: Mapping[str, str]) -> None:
        parts = list(parts)
        parts.append(f"Sort: {sort.sort_by} {sort.sort_order}")
        if filters:
            parts.append("Filters: " + ", ".join(f"{k}~'{v}'" for k, v in sorted(filters.items())))
        self.text = " | ".join(parts)
        self._bar.update(self.text)
