"""Generic page-of-results container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """A single page of items plus meta-data."""

    items: Sequence[T]
    total: int           # total items in the whole result set
    pages: int           # total number of pages
    page: int            # current page index (1-based)

    per_page: int        # size of each page (for convenience)

    # ------------- helpers -------------
    def has_next(self) -> bool:
        return self.page < self.pages

    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def first_index(self) -> int:
        """1-based index of the first item shown (0 when empty)."""
        if self.total == 0:
            return 0
        return min((self.page - 1) * self.per_page + 1, self.total)

    @property
    def last_index(self) -> int:
        return min(self.page * self.per_page, self.total)


def total_pages(total: int, per_page: int) -> int:
    """ceil(total / per_page); 0 for an empty result set."""
    if per_page <= 0 or total <= 0:
        return 0
    return (total + per_page - 1) // per_page
