"""
In-memory lifecycle event bus for the notification SDK.

Providers don't report delivery outcomes to whoever called send_async();
they publish lifecycle events here and any registered subscriber reacts.
In a real deployment this would be the provider's webhook/callback stream.

Design decisions:
- Synchronous delivery on the publishing thread (usually an SDK worker)
- Type-based subscriptions plus a wildcard for "every event"
- Events are delivered to all subscribers in registration order
- Optional in-memory event log for debugging and tests, off by default
- Subscriber table and event log are guarded by a lock, handlers run
  outside of it so a slow subscriber doesn't block registration
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, ClassVar, Optional
from uuid import uuid4

logger = logging.getLogger("event_bus")

WILDCARD = "*"


@dataclass(frozen=True, kw_only=True)
class NotificationEvent:
    """
    Base class for all SDK lifecycle events.

    Attributes:
        notification_id: Id of the notification the event is about. The
            gateway sets it to the transaction id.
        provider: Name of the provider that handled the notification
        channel: Channel value ("email", "sms", "push")
        event_id: Unique identifier for this event instance
        timestamp: When the event occurred
    """
    event_type: ClassVar[str] = "NotificationEvent"

    notification_id: str
    provider: str
    channel: str
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return (
            f"{self.event_type}(notification={self.notification_id}, "
            f"provider={self.provider}, channel={self.channel})"
        )


# Type alias for event handler functions
EventHandler = Callable[[NotificationEvent], None]


class EventBus:
    """
    Pub/sub for notification lifecycle events.

    Example usage:
        bus = EventBus()
        bus.subscribe(EventTypes.SENT, lambda event: print(event))
        bus.publish(NotificationSentEvent(notification_id="tx-1", provider="twilio", channel="sms"))
    """

    def __init__(self, log_events: bool = False):
        """
        Initialize the event bus with empty subscriber lists.

        Args:
            log_events: Keep every published event in memory (debugging and
                tests only; the log is never trimmed)
        """
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._event_log: list[NotificationEvent] = []
        self._log_events = log_events
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: The type of event to subscribe to (see EventTypes)
            handler: Function to call when an event of this type is published

        Note: The same handler can be subscribed multiple times (will be called multiple times).
        """
        with self._lock:
            self._subscribers[event_type].append(handler)
        logger.debug(f"Subscribed handler to '{event_type}' events")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to ALL events (audit, logging, debugging)."""
        self.subscribe(WILDCARD, handler)

    def publish(self, event: NotificationEvent) -> int:
        """
        Publish an event to all subscribers.

        Returns:
            Number of handlers that received the event

        Note: If a handler raises an exception, it's logged but doesn't stop
        other handlers and never reaches the publisher.
        """
        with self._lock:
            if self._log_events:
                self._event_log.append(event)
            handlers = list(self._subscribers.get(event.event_type, []))
            handlers += self._subscribers.get(WILDCARD, [])

        logger.info(f"Publishing: {event}")

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Handler raised exception for {event}")

        if not handlers:
            logger.warning(f"No handlers for event type '{event.event_type}'")

        return len(handlers)

    def get_subscriber_count(self, event_type: str) -> int:
        """Get the number of subscribers for an event type."""
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def get_event_log(self, notification_id: Optional[str] = None) -> list[NotificationEvent]:
        """
        Get the log of published events, optionally for one notification.
        """
        with self._lock:
            events = list(self._event_log)
        if notification_id is None:
            return events
        return [e for e in events if e.notification_id == notification_id]
