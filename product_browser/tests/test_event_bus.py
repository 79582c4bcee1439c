import unittest
from unittest.mock import Mock

from ..paging.event_bus import EventBus
from ..paging.events import EventType


class TestEventBus(unittest.TestCase):
    def setUp(self):
        self.bus = EventBus()

    def test_publish_passes_type_and_data(self):
        callback = Mock()
        self.bus.subscribe(EventType.PAGE_LOADED, callback)
        self.bus.publish(EventType.PAGE_LOADED, page=3, epoch=1)
        callback.assert_called_once_with(
            event_type="page_loaded", event_enum=EventType.PAGE_LOADED, page=3, epoch=1
        )

    def test_wildcard_subscribers_see_every_event(self):
        callback = Mock()
        self.bus.subscribe_all(callback)
        self.bus.publish(EventType.CACHE_RESET, epoch=2)
        self.bus.publish(EventType.PAGES_EVICTED, pages=frozenset({1}))
        self.assertEqual(callback.call_count, 2)
        self.assertEqual(self.bus.subscriber_count(EventType.PAGE_FAILED), 1)

        self.assertTrue(self.bus.unsubscribe_all(callback))
        self.assertFalse(self.bus.has_subscribers(EventType.CACHE_RESET))

    def test_subscribing_twice_delivers_once(self):
        callback = Mock()
        self.bus.subscribe(EventType.PAGE_REQUESTED, callback)
        self.bus.subscribe(EventType.PAGE_REQUESTED, callback)
        self.bus.publish(EventType.PAGE_REQUESTED, page=1, epoch=0)
        callback.assert_called_once()
        self.assertTrue(self.bus.unsubscribe(EventType.PAGE_REQUESTED, callback))
        self.assertFalse(self.bus.unsubscribe(EventType.PAGE_REQUESTED, callback))

    def test_failing_subscriber_does_not_stop_others(self):
        broken = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        self.bus.subscribe(EventType.PAGE_FAILED, broken)
        self.bus.subscribe_all(healthy)
        with self.assertLogs("product_browser.paging.event_bus", level="ERROR"):
            self.bus.publish(EventType.PAGE_FAILED, page=1)
        healthy.assert_called_once()

    def test_subscriber_count_adds_wildcard_handlers(self):
        self.assertEqual(self.bus.subscriber_count(EventType.PAGE_LOADED), 0)
        self.bus.subscribe(EventType.PAGE_LOADED, Mock())
        self.bus.subscribe(EventType.PAGE_LOADED, Mock())
        self.bus.subscribe_all(Mock())
        self.assertEqual(self.bus.subscriber_count(EventType.PAGE_LOADED), 3)
        self.assertEqual(self.bus.subscriber_count(EventType.PAGE_FAILED), 1)
        self.assertTrue(self.bus.has_subscribers(EventType.PAGE_FAILED))
        self.assertFalse(self.bus.unsubscribe_all(Mock()))

    def test_subscriptions_are_logged_at_debug(self):
        callback = Mock()
        with self.assertLogs("product_browser.paging.event_bus", level="DEBUG") as logs:
            self.bus.subscribe(EventType.PAGE_LOADED, callback)
            self.bus.unsubscribe(EventType.PAGE_LOADED, callback)
            self.bus.clear()
        self.assertEqual(len(logs.output), 3)
        self.assertIn("Subscribed to PAGE_LOADED", logs.output[0])

    def test_clear(self):
        self.bus.subscribe_all(Mock())
        self.bus.subscribe(EventType.PAGE_LOADED, Mock())
        self.bus.clear()
        self.assertFalse(self.bus.has_subscribers(EventType.PAGE_LOADED))


if __name__ == "__main__":
    unittest.main()
