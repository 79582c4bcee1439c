# product_browser/paging/loader.py
"""
On-demand windowed page loader.

Backs a virtualized table: the rendering layer reports which row indices are
visible, the loader fetches the pages around them, drops pages that scrolled
far away and throws everything out when sort or filter parameters change.

Scheduling is single-threaded and cooperative. A fetch suspends only while
awaiting the query service; every cache mutation happens synchronously
between suspension points, so the cache, the in-flight table, the total and
the epoch always change together. Responses may land in any order: the epoch
and the keep-range are checked when a response is applied, not when the
request is issued.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Generic, Iterable, List, Optional, Set, Tuple, TypeVar

from product_browser.errors import FetchFailure, InvalidPageRequest
from product_browser.interfaces.query_service import QueryParams, QueryResult, QueryServiceInterface
from product_browser.models.pagination import total_pages as count_pages
from product_browser.paging.event_bus import EventBus
from product_browser.paging.events import DiscardReason, EventType
from product_browser.paging.page_cache import PageCache, RowSlot
from product_browser.paging.window import (
    compute_evictions,
    compute_keep_range,
    compute_target_pages,
    in_range,
    page_span,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Spawner = Callable[[Awaitable[None]], Any]

DEFAULT_PAGE_SIZE = 50
DEFAULT_PREFETCH_PAGES = 1
DEFAULT_BUFFER_PAGES = 2


class PageLoader(Generic[T]):
    """Fetch coordinator, eviction driver and parameter-epoch guard in one place."""

    def __init__(
        self,
        query_service: QueryServiceInterface[T],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        prefetch_pages: int = DEFAULT_PREFETCH_PAGES,
        buffer_pages: int = DEFAULT_BUFFER_PAGES,
        params: Optional[QueryParams] = None,
        event_bus: Optional[EventBus] = None,
        spawn: Optional[Spawner] = None,
    ) -> None:
        if prefetch_pages < 0:
            raise ValueError(f"prefetch_pages must be >= 0, got {prefetch_pages}")
        if buffer_pages < prefetch_pages:
            # prefetched pages would be evicted on the very next scroll event
            raise ValueError(
                f"buffer_pages ({buffer_pages}) must be >= prefetch_pages ({prefetch_pages})"
            )

        self._query = query_service
        self._cache: PageCache[T] = PageCache(page_size)
        self.prefetch_pages = prefetch_pages
        self.buffer_pages = buffer_pages
        self.event_bus = event_bus or EventBus()

        self._params = params or QueryParams()
        self._epoch = 0
        # page -> epoch the request was issued under; only current-epoch entries
        self._in_flight: Dict[int, int] = {}
        self._visible: Optional[Tuple[int, int]] = None

        self._spawn = spawn or self._spawn_task
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------ #
    # read side
    # ------------------------------------------------------------------ #

    @property
    def page_size(self) -> int:
        return self._cache.page_size

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def params(self) -> QueryParams:
        return self._params

    @property
    def total_count(self) -> int:
        return self._cache.total_count

    @property
    def total_known(self) -> bool:
        return self._cache.total_known

    @property
    def total_pages(self) -> int:
        return self._cache.total_pages

    @property
    def loaded_page_count(self) -> int:
        return len(self._cache)

    @property
    def resident_pages(self) -> FrozenSet[int]:
        return self._cache.resident

    @property
    def in_flight_pages(self) -> FrozenSet[int]:
        return frozenset(p for p, e in self._in_flight.items() if e == self._epoch)

    @property
    def visible_range(self) -> Optional[Tuple[int, int]]:
        return self._visible

    @property
    def is_loading(self) -> bool:
        return bool(self.in_flight_pages)

    def keep_range(self, total_pages: Optional[int] = None) -> Optional[Tuple[int, int]]:
        """Current keep-range, or None before any visible range was reported."""
        if self._visible is None:
            return None
        if total_pages is None:
            total_pages = self._known_total_pages()
        start_page, end_page = page_span(*self._visible, self.page_size)
        return compute_keep_range(start_page, end_page, self.buffer_pages, total_pages)

    def rows(self) -> List[RowSlot]:
        return self._cache.rows()

    def slot(self, index: int) -> RowSlot:
        return self._cache.slot(index)

    def snapshot(self) -> Dict[str, Any]:
        """Counters for status bars and logs."""
        return {
            "epoch": self._epoch,
            "total": self.total_count,
            "total_pages": self.total_pages,
            "loaded_pages": self.loaded_page_count,
            "in_flight": len(self.in_flight_pages),
        }

    # ------------------------------------------------------------------ #
    # inputs
    # ------------------------------------------------------------------ #

    def on_visible_range_changed(self, start_index: int, stop_index: int) -> FrozenSet[int]:
        """
        Record the visible rows, fetch what is missing around them and evict
        what fell out of the keep-range. Safe to call on every scroll event.

        Returns:
            Pages for which a new request was issued
        """
        start_index = max(0, start_index)
        stop_index = max(start_index, stop_index)
        self._visible = (start_index, stop_index)

        targets = compute_target_pages(
            start_index,
            stop_index,
            self.page_size,
            self._known_total_pages(),
            self.prefetch_pages,
        )
        issued = self.ensure_loaded(targets)
        self._evict_outside_window()
        return issued

    def on_parameters_changed(self, params: QueryParams, *, scroll_to_top: bool = True) -> FrozenSet[int]:
        """
        Switch to new sort/filter parameters: bump the epoch, drop every page,
        every in-flight entry and the total, then refetch the visible window.

        With `scroll_to_top` the window keeps its height but moves back to
        row 0, the way the table jumps to the top on a new sort.
        """
        if params == self._params:
            return frozenset()
        self._params = params
        return self._reset(scroll_to_top=scroll_to_top)

    def invalidate(self, *, scroll_to_top: bool = False) -> FrozenSet[int]:
        """Force a full refetch under the current parameters."""
        return self._reset(scroll_to_top=scroll_to_top)

    def ensure_loaded(self, pages: Iterable[int]) -> FrozenSet[int]:
        """
        Request every page that is neither resident nor already in flight
        under the current epoch. Out-of-range pages are ignored.

        Returns:
            Pages for which a new request was issued
        """
        issued: List[int] = []
        for page in sorted(set(pages)):
            if not self._is_valid_page(page):
                continue
            if page in self._cache:
                continue
            if self._in_flight.get(page) == self._epoch:
                continue

            epoch = self._epoch
            self._in_flight[page] = epoch
            issued.append(page)
            logger.debug("Requesting page %s (epoch %s)", page, epoch)
            self.event_bus.publish(EventType.PAGE_REQUESTED, page=page, epoch=epoch)
            self._spawn(self._fetch(page, epoch, self._params))
        return frozenset(issued)

    async def wait_idle(self) -> None:
        """Wait until every fetch started by the default spawner has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------ #
    # internals
    # ------------------------------------------------------------------ #

    def _reset(self, *, scroll_to_top: bool) -> FrozenSet[int]:
        self._epoch += 1
        self._cache.clear()
        self._in_flight.clear()
        logger.info("Page cache reset (epoch %s, params %s)", self._epoch, self._params)
        self.event_bus.publish(EventType.CACHE_RESET, epoch=self._epoch, params=self._params)

        if self._visible is None:
            return self.ensure_loaded({1})

        start_index, stop_index = self._visible
        if scroll_to_top:
            start_index, stop_index = 0, stop_index - start_index
            self._visible = (start_index, stop_index)
        return self.ensure_loaded(
            compute_target_pages(start_index, stop_index, self.page_size, None, self.prefetch_pages)
        )

    def _known_total_pages(self) -> Optional[int]:
        return self._cache.total_pages if self._cache.total_known else None

    def _is_valid_page(self, page: int) -> bool:
        total_pages = self._known_total_pages()
        if page >= 1 and (total_pages is None or page <= total_pages):
            return True
        logger.debug("Ignoring request: %s", InvalidPageRequest(page, total_pages or 0))
        return False

    def _release(self, page: int, epoch: int) -> None:
        """Remove the in-flight entry, unless a newer epoch owns the slot now."""
        if self._in_flight.get(page) == epoch:
            del self._in_flight[page]

    async def _fetch(self, page: int, epoch: int, params: QueryParams) -> None:
        try:
            result = await self._query.query(page, self.page_size, params)
        except asyncio.CancelledError:
            self._release(page, epoch)
            raise
        except Exception as exc:
            self._on_failure(FetchFailure(page, epoch, exc))
            return
        self._apply(page, epoch, result)

    def _on_failure(self, failure: FetchFailure) -> None:
        self._release(failure.page, failure.epoch)
        if failure.epoch != self._epoch:
            logger.debug("Stale fetch failed, ignoring: %s", failure)
            return
        logger.warning("%s; page stays a placeholder until it is visible again", failure)
        self.event_bus.publish(
            EventType.PAGE_FAILED, page=failure.page, epoch=failure.epoch, error=failure
        )

    def _apply(self, page: int, epoch: int, result: QueryResult[T]) -> bool:
        """Apply a settled response; returns True when the page was stored."""
        self._release(page, epoch)

        if epoch != self._epoch:
            logger.debug("Discarding page %s from epoch %s (current %s)", page, epoch, self._epoch)
            self.event_bus.publish(
                EventType.PAGE_DISCARDED, page=page, epoch=epoch, reason=DiscardReason.STALE_EPOCH
            )
            return False

        total_was_known = self._cache.total_known
        previous_total = self._cache.total_count
        total_pages = count_pages(result.total, self.page_size)

        keep = self.keep_range(total_pages)
        # past the last page happens when the request went out before the total was known
        if page > total_pages or (keep is not None and not in_range(page, keep)):
            logger.debug("Discarding page %s, outside keep-range %s of %s pages", page, keep, total_pages)
            self.event_bus.publish(
                EventType.PAGE_DISCARDED, page=page, epoch=epoch, reason=DiscardReason.OUT_OF_RANGE
            )
            # the total is still current; take it without resurrecting the page
            self._cache.store_total(result.total)
            stored = False
        else:
            self._cache.store(page, result.rows, result.total)
            self.event_bus.publish(
                EventType.PAGE_LOADED, page=page, epoch=epoch, total=self._cache.total_count
            )
            stored = True

        if not total_was_known or previous_total != self._cache.total_count:
            self._on_total_changed()
        return stored

    def _on_total_changed(self) -> None:
        # the window can now be clamped, and look-ahead past the first
        # visible pages becomes possible
        if self._visible is not None:
            self.on_visible_range_changed(*self._visible)

    def _evict_outside_window(self) -> None:
        keep = self.keep_range()
        if keep is None:
            return
        evicted = self._cache.evict(compute_evictions(self._cache.resident, *keep))
        if evicted:
            logger.debug("Evicted pages %s (keep-range %s)", sorted(evicted), keep)
            self.event_bus.publish(
                EventType.PAGES_EVICTED, pages=evicted, keep_range=keep, epoch=self._epoch
            )

    def _spawn_task(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
