# product_browser/paging/event_bus.py

import logging
from typing import Any, Callable, Dict, List

from product_browser.paging.events import EventType

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]


class EventBus:
    """
    Publish/subscribe hub for page-loader notifications.

    The loader publishes; widgets and status bars subscribe, so the paging
    core never needs to know what draws it. Handlers are called synchronously
    with `event_type` (the enum value), `event_enum` and the event data as
    keyword arguments.
    """

    def __init__(self) -> None:
        """Create a bus with no subscribers."""
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._wildcard: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Register a handler for one event type.

        Args:
            event_type: Event to listen for (EventType enum)
            handler: Called with the event payload as keyword arguments;
                subscribing the same handler twice has no effect
        """
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Subscribed to %s", event_type.name)

    def subscribe_all(self, handler: EventHandler) -> None:
        """
        Register a handler for every event type, including ones added later.

        Args:
            handler: Called after the type-specific handlers of each event
        """
        if handler not in self._wildcard:
            self._wildcard.append(handler)
            logger.debug("Subscribed to all events")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """
        Remove a handler registered with `subscribe`.

        Args:
            event_type: Event the handler was registered for (EventType enum)
            handler: The handler to remove

        Returns:
            True if the handler was subscribed, False otherwise
        """
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed from %s", event_type.name)
            return True
        return False

    def unsubscribe_all(self, handler: EventHandler) -> bool:
        """
        Remove a handler registered with `subscribe_all`.

        Args:
            handler: The wildcard handler to remove

        Returns:
            True if the handler was subscribed, False otherwise
        """
        if handler in self._wildcard:
            self._wildcard.remove(handler)
            return True
        return False

    def publish(self, event_type: EventType, **data: Any) -> None:
        """
        Deliver an event to its subscribers, then to the wildcard ones.

        A handler that raises is logged and skipped; the remaining handlers
        still run and nothing propagates back to the publisher.

        Args:
            event_type: Event being published (EventType enum)
            **data: Event data passed on to every handler
        """
        payload = {"event_type": event_type.value, "event_enum": event_type, **data}
        for handler in [*self._handlers.get(event_type, []), *self._wildcard]:
            try:
                handler(**payload)
            except Exception:
                logger.exception("Handler %r failed on %s", handler, event_type.name)

    def subscriber_count(self, event_type: EventType) -> int:
        """
        Count the handlers an event of this type would reach.

        Args:
            event_type: The event type to check (EventType enum)

        Returns:
            Type-specific handlers plus wildcard handlers
        """
        return len(self._handlers.get(event_type, [])) + len(self._wildcard)

    def has_subscribers(self, event_type: EventType) -> bool:
        """
        Check whether publishing this event type would reach anyone.

        Args:
            event_type: The event type to check (EventType enum)

        Returns:
            True if at least one handler would be called
        """
        return self.subscriber_count(event_type) > 0

    def clear(self) -> None:
        """Drop every subscription, e.g. when the owning screen unmounts."""
        self._handlers.clear()
        self._wildcard.clear()
        logger.debug("All event subscriptions cleared")
