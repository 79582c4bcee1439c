# product_browser/interfaces/query_service.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

SORT_ORDERS = ("asc", "desc")


def normalize_filters(filters: Optional[Mapping[str, str]]) -> Tuple[Tuple[str, str], ...]:
    """Drop empty values and freeze into a sorted tuple of (column, text)."""
    if not filters:
        return ()
    return tuple(sorted((k, v) for k, v in filters.items() if v))


@dataclass(frozen=True)
class QueryParams:
    """Sort and filter parameters shared by every page of a result set."""
    sort_by: str = "product_id"
    sort_order: str = "asc"
    filters: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        sort_by: str = "product_id",
        sort_order: str = "asc",
        filters: Optional[Mapping[str, str]] = None,
    ) -> "QueryParams":
        return cls(sort_by=sort_by, sort_order=sort_order, filters=normalize_filters(filters))

    @property
    def filter_map(self) -> Dict[str, str]:
        return dict(self.filters)


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """One page of rows plus the number of rows matching the filters."""
    rows: Sequence[T]
    total: int


class QueryServiceInterface(Generic[T]):
    """Interface for the paged query side of a data source."""

    async def query(self, page: int, page_size: int, params: QueryParams) -> QueryResult[T]:
        """
        Fetch one page of rows.

        Args:
            page: 1-based page number
            page_size: Rows per page (> 0)
            params: Sort and filter parameters

        Returns:
            QueryResult with the page rows and the total matching count

        Raises:
            QueryError: If the parameters are rejected by the data source

        Must be safe to call concurrently for different pages with the same
        parameters.
        """
        raise NotImplementedError("Subclasses must implement this method")

    def describe(self) -> Dict[str, Any]:
        """Short description of the backing source, for diagnostics."""
        return {"source": type(self).__name__}
