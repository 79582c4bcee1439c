# product_browser/paging/page_cache.py
"""
Page-granularity row storage and the row-slot projection drawn by the
virtualized list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Generic, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from product_browser.models.pagination import total_pages as _total_pages
from product_browser.paging.window import page_for_index

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Loaded(Generic[T]):
    """A row slot whose page is resident."""
    row: T


@dataclass(frozen=True, slots=True)
class PendingSlot:
    """A row slot that exists (counted in the total) but is not fetched yet."""


Pending = PendingSlot()

RowSlot = Union[Loaded[T], PendingSlot]


class PageCache(Generic[T]):
    """
    Page number -> rows, plus the total row count of the current result set.

    Invariants:
        * every page holds exactly `page_size` rows except possibly the last
        * once the total is known, resident pages lie within 1..total_pages
    """

    def __init__(self, page_size: int) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.page_size = page_size
        self._pages: Dict[int, Tuple[T, ...]] = {}
        self._total: Optional[int] = None

    # ------------------------------------------------------------------ #
    # queries
    # ------------------------------------------------------------------ #

    def __contains__(self, page: object) -> bool:
        return page in self._pages

    def __len__(self) -> int:
        return len(self._pages)

    def get(self, page: int) -> Optional[Tuple[T, ...]]:
        return self._pages.get(page)

    @property
    def pages(self) -> Mapping[int, Tuple[T, ...]]:
        return self._pages

    @property
    def resident(self) -> FrozenSet[int]:
        return frozenset(self._pages)

    @property
    def total_known(self) -> bool:
        return self._total is not None

    @property
    def total_count(self) -> int:
        return self._total or 0

    @property
    def total_pages(self) -> int:
        return _total_pages(self.total_count, self.page_size)

    def slot(self, index: int) -> RowSlot:
        """Row slot for one 0-based index, without building the whole list."""
        if index < 0 or index >= self.total_count:
            raise IndexError(index)
        rows = self._pages.get(page_for_index(index, self.page_size))
        offset = index % self.page_size
        if rows is None or offset >= len(rows):
            return Pending
        return Loaded(rows[offset])

    # ------------------------------------------------------------------ #
    # mutation
    # ------------------------------------------------------------------ #

    def store(self, page: int, rows: Sequence[T], total: int) -> None:
        """Write one page and the total that came with it."""
        if len(rows) > self.page_size:
            logger.warning(
                "Page %s came back with %s rows (page size %s); extra rows dropped",
                page, len(rows), self.page_size,
            )
            rows = rows[: self.page_size]
        self._pages[page] = tuple(rows)
        self.store_total(total)

    def store_total(self, total: int) -> None:
        """Record the total row count, dropping pages past the new end."""
        self._total = max(0, total)
        last_page = self.total_pages
        for orphan in [p for p in self._pages if p > last_page]:
            del self._pages[orphan]

    def evict(self, pages: Iterable[int]) -> FrozenSet[int]:
        """Drop pages; returns the ones that were actually resident."""
        removed = frozenset(p for p in pages if self._pages.pop(p, None) is not None)
        return removed

    def clear(self) -> None:
        self._pages.clear()
        self._total = None

    def rows(self) -> List[RowSlot]:
        return assemble_visible_rows(self._pages, self.total_count, self.page_size)


def assemble_visible_rows(
    pages: Mapping[int, Sequence[T]],
    total: int,
    page_size: int,
) -> List[RowSlot]:
    """
    Flatten resident pages into `total` row slots, `Pending` wherever the
    containing page is not resident.
    """
    slots: List[RowSlot] = []
    for index in range(max(0, total)):
        rows = pages.get(page_for_index(index, page_size))
        offset = index % page_size
        if rows is None or offset >= len(rows):
            slots.append(Pending)
        else:
            slots.append(Loaded(rows[offset]))
    return slots
