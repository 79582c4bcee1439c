import asyncio
import unittest
from dataclasses import dataclass
from typing import Any, List
from unittest.mock import Mock

from ..errors import FetchFailure, QueryError
from ..interfaces.query_service import QueryParams, QueryResult, QueryServiceInterface
from ..paging.event_bus import EventBus
from ..paging.events import DiscardReason, EventType
from ..paging.loader import PageLoader
from ..paging.page_cache import Loaded, Pending
from ..paging.window import in_range


@dataclass
class Call:
    page: int
    page_size: int
    params: QueryParams
    future: Any


class ControlledQueryService(QueryServiceInterface[int]):
    """Every query waits until the test resolves it; rows are their own index."""

    def __init__(self):
        self.calls: List[Call] = []

    async def query(self, page, page_size, params):
        future = asyncio.get_running_loop().create_future()
        self.calls.append(Call(page, page_size, params, future))
        return await future

    def requested(self, page):
        return [c for c in self.calls if c.page == page]

    def pending(self, page=None):
        return [
            c for c in self.calls
            if not c.future.done() and (page is None or c.page == page)
        ]

    def resolve(self, page, total, index=0):
        call = self.pending(page)[index]
        start = (page - 1) * call.page_size
        rows = tuple(range(start, max(start, min(start + call.page_size, total))))
        call.future.set_result(QueryResult(rows=rows, total=total))

    def resolve_all(self, total):
        for call in self.pending():
            self.resolve(call.page, total)

    def fail(self, page, exc):
        self.pending(page)[0].future.set_exception(exc)


class InstantQueryService(QueryServiceInterface[int]):
    def __init__(self, total):
        self.total = total

    async def query(self, page, page_size, params):
        start = (page - 1) * page_size
        return QueryResult(rows=tuple(range(start, min(start + page_size, self.total))), total=self.total)


async def settle():
    for _ in range(10):
        await asyncio.sleep(0)


class TestPageLoader(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.service = ControlledQueryService()
        self.bus = EventBus()
        self.events = []
        self.bus.subscribe_all(lambda **event: self.events.append(event))
        self.loader = PageLoader(
            self.service, page_size=50, prefetch_pages=1, buffer_pages=2, event_bus=self.bus
        )

    def events_of(self, event_type):
        return [e for e in self.events if e["event_enum"] is event_type]

    async def test_first_response_learns_total_and_prefetches(self):
        self.assertEqual(self.loader.on_visible_range_changed(0, 49), {1})
        await settle()

        self.service.resolve(1, 237)
        await settle()

        self.assertEqual(self.loader.total_count, 237)
        self.assertEqual(self.loader.total_pages, 5)
        self.assertEqual(self.loader.resident_pages, {1})
        self.assertEqual(self.loader.in_flight_pages, {2})
        self.assertEqual(len(self.service.requested(2)), 1)

        slots = self.loader.rows()
        self.assertEqual(len(slots), 237)
        self.assertEqual(slots[0], Loaded(0))
        self.assertEqual(slots[49], Loaded(49))
        self.assertIs(slots[50], Pending)

    async def test_in_flight_page_is_never_requested_twice(self):
        self.assertEqual(self.loader.on_visible_range_changed(300, 349), {6, 7})
        await settle()

        self.assertEqual(self.loader.ensure_loaded({7}), frozenset())
        self.assertEqual(self.loader.on_visible_range_changed(300, 349), frozenset())
        await settle()

        self.assertEqual(len(self.service.requested(7)), 1)

    async def test_huge_range_with_unknown_total_issues_a_bounded_batch(self):
        self.assertEqual(self.loader.on_visible_range_changed(0, 1_000_000), {1, 2, 3})
        await settle()
        self.assertEqual(sorted(c.page for c in self.service.pending()), [1, 2, 3])

        self.service.resolve(1, 500)
        await settle()

        # total known: the window is clamped to the 10 real pages
        self.assertEqual(self.loader.total_pages, 10)
        self.assertTrue(self.loader.in_flight_pages <= frozenset(range(1, 11)))
        self.assertEqual(len(self.service.calls), len({c.page for c in self.service.calls}))

    async def test_stale_response_never_touches_the_cache(self):
        self.loader.on_visible_range_changed(0, 49)
        await settle()

        issued = self.loader.on_parameters_changed(QueryParams.build(sort_by="price", sort_order="desc"))
        self.assertEqual(issued, {1})
        self.assertEqual(self.loader.epoch, 1)
        await settle()
        self.assertEqual(len(self.service.pending(1)), 2)

        # the request from epoch 0 lands first
        self.service.resolve(1, 237, index=0)
        await settle()

        self.assertEqual(self.loader.resident_pages, frozenset())
        self.assertFalse(self.loader.total_known)
        self.assertEqual(self.loader.in_flight_pages, {1})
        discarded = self.events_of(EventType.PAGE_DISCARDED)
        self.assertEqual(discarded[-1]["reason"], DiscardReason.STALE_EPOCH)
        self.assertEqual(discarded[-1]["epoch"], 0)

        self.service.resolve(1, 120)
        await settle()
        self.assertEqual(self.loader.resident_pages, {1})
        self.assertEqual(self.loader.total_count, 120)
        self.assertEqual(self.service.requested(1)[1].params.sort_by, "price")

    async def test_parameter_change_resets_everything_and_refetches(self):
        self.loader.on_visible_range_changed(0, 49)
        await settle()
        self.service.resolve(1, 1000)
        await settle()
        self.service.resolve(2, 1000)
        await settle()
        self.loader.on_visible_range_changed(100, 149)
        await settle()
        self.assertEqual(self.loader.in_flight_pages, {3, 4})

        issued = self.loader.on_parameters_changed(QueryParams.build(filters={"category": "Books"}))

        self.assertEqual(issued, {1})
        self.assertEqual(self.loader.resident_pages, frozenset())
        self.assertEqual(self.loader.in_flight_pages, {1})
        self.assertFalse(self.loader.total_known)
        self.assertEqual(self.loader.visible_range, (0, 49))
        self.assertEqual(len(self.events_of(EventType.CACHE_RESET)), 1)

        # the old page 4 request lands after the reset
        await settle()
        self.service.resolve(4, 1000)
        await settle()
        self.assertNotIn(4, self.loader.resident_pages)

    async def test_equal_parameters_are_a_no_op(self):
        self.loader.on_visible_range_changed(0, 49)
        self.assertEqual(self.loader.on_parameters_changed(QueryParams()), frozenset())
        self.assertEqual(self.loader.epoch, 0)
        self.assertEqual(self.events_of(EventType.CACHE_RESET), [])

    async def test_failed_fetch_is_retried_on_next_visibility_report(self):
        self.loader.on_visible_range_changed(0, 49)
        await settle()

        self.service.fail(1, QueryError("database is locked"))
        with self.assertLogs("product_browser.paging.loader", level="WARNING"):
            await settle()

        self.assertEqual(self.loader.in_flight_pages, frozenset())
        self.assertEqual(self.loader.resident_pages, frozenset())
        failed = self.events_of(EventType.PAGE_FAILED)
        self.assertEqual(failed[0]["page"], 1)
        self.assertIsInstance(failed[0]["error"], FetchFailure)
        self.assertIsInstance(failed[0]["error"].cause, QueryError)

        self.assertEqual(self.loader.on_visible_range_changed(0, 49), {1})

    async def test_response_outside_keep_range_is_dropped_but_total_kept(self):
        self.loader.on_visible_range_changed(0, 49)
        self.assertEqual(self.loader.on_visible_range_changed(5000, 5049), {100, 101})
        await settle()

        self.service.resolve(1, 10000)
        await settle()

        self.assertNotIn(1, self.loader.resident_pages)
        self.assertEqual(self.loader.total_count, 10000)
        discarded = self.events_of(EventType.PAGE_DISCARDED)
        self.assertEqual(discarded[-1]["page"], 1)
        self.assertEqual(discarded[-1]["reason"], DiscardReason.OUT_OF_RANGE)
        # the known total now allows look-ahead
        self.assertIn(102, self.loader.in_flight_pages)

    async def test_page_past_the_end_is_dropped(self):
        self.loader.ensure_loaded({3})
        await settle()
        self.service.resolve(3, 60)
        await settle()

        self.assertEqual(self.loader.resident_pages, frozenset())
        self.assertEqual(self.loader.total_pages, 2)
        self.assertEqual(self.loader.ensure_loaded({0, 3}), frozenset())

    async def test_empty_result_set(self):
        self.loader.on_visible_range_changed(0, 30)
        await settle()
        self.service.resolve(1, 0)
        await settle()

        self.assertTrue(self.loader.total_known)
        self.assertEqual(self.loader.rows(), [])
        self.assertEqual(self.service.pending(), [])

    async def test_resident_pages_stay_inside_keep_range(self):
        for start in (0, 400, 1200, 300, 4000, 0, 2450):
            self.loader.on_visible_range_changed(start, start + 39)
            for _ in range(5):
                await settle()
                self.service.resolve_all(5000)
            await settle()

            keep = self.loader.keep_range()
            for page in self.loader.resident_pages:
                self.assertTrue(in_range(page, keep), f"page {page} outside {keep}")
            for page in range(1, 101):
                self.assertLessEqual(len(self.service.pending(page)), 1)


class TestPageLoaderEviction(unittest.IsolatedAsyncioTestCase):
    async def test_scrolling_away_evicts_pages_behind(self):
        service = ControlledQueryService()
        bus = Mock(spec=EventBus)
        loader = PageLoader(service, page_size=50, buffer_pages=2, event_bus=bus)

        loader.ensure_loaded(range(1, 6))
        await settle()
        for page in range(1, 6):
            service.resolve(page, 1000)
        await settle()

        loader.on_visible_range_changed(100, 149)
        self.assertEqual(loader.keep_range(), (1, 5))
        self.assertEqual(loader.resident_pages, {1, 2, 3, 4, 5})

        issued = loader.on_visible_range_changed(350, 399)

        self.assertEqual(issued, {7, 8, 9})
        self.assertEqual(loader.keep_range(), (6, 10))
        self.assertEqual(loader.resident_pages, frozenset())
        bus.publish.assert_any_call(
            EventType.PAGES_EVICTED, pages=frozenset({1, 2, 3, 4, 5}), keep_range=(6, 10), epoch=0
        )


class TestPageLoaderScheduling(unittest.IsolatedAsyncioTestCase):
    async def test_wait_idle_with_default_spawner(self):
        loader = PageLoader(InstantQueryService(237), page_size=50)

        self.assertEqual(loader.on_visible_range_changed(0, 120), {1, 2, 3})
        await loader.wait_idle()

        self.assertEqual(loader.resident_pages, {1, 2, 3, 4})
        self.assertFalse(loader.is_loading)
        self.assertEqual(
            loader.snapshot(),
            {"epoch": 0, "total": 237, "total_pages": 5, "loaded_pages": 4, "in_flight": 0},
        )

    async def test_cancelled_fetch_releases_its_page(self):
        tasks = []
        service = ControlledQueryService()
        loader = PageLoader(service, page_size=50, spawn=lambda coro: tasks.append(asyncio.ensure_future(coro)))

        loader.on_visible_range_changed(0, 49)
        await settle()
        self.assertEqual(loader.in_flight_pages, {1})

        tasks[0].cancel()
        await settle()

        self.assertEqual(loader.in_flight_pages, frozenset())
        self.assertEqual(loader.on_visible_range_changed(0, 49), {1})

    def test_buffer_smaller_than_prefetch_is_rejected(self):
        with self.assertRaises(ValueError):
            PageLoader(InstantQueryService(10), prefetch_pages=3, buffer_pages=2)


if __name__ == "__main__":
    unittest.main()
