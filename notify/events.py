"""
Lifecycle events emitted by the notification SDK.

- NotificationSentEvent: the provider accepted the notification
- NotificationFailedEvent: the provider failed and retries are exhausted
- NotificationRetryEvent: an attempt failed and another one is scheduled

Validation failures (e.g. a push notification without a device token) are
rejected before any provider is involved and emit nothing.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from notify.event_bus import NotificationEvent


class EventTypes:
    """Constants for event type names."""
    SENT = "NotificationSent"
    FAILED = "NotificationFailed"
    RETRY = "NotificationRetry"


@dataclass(frozen=True, kw_only=True)
class NotificationSentEvent(NotificationEvent):
    event_type: ClassVar[str] = EventTypes.SENT


@dataclass(frozen=True, kw_only=True)
class NotificationFailedEvent(NotificationEvent):
    """Terminal failure after the retry policy gave up."""
    event_type: ClassVar[str] = EventTypes.FAILED

    error_message: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class NotificationRetryEvent(NotificationEvent):
    """A failed attempt that will be retried."""
    event_type: ClassVar[str] = EventTypes.RETRY

    attempt: int
    error_message: Optional[str] = None
