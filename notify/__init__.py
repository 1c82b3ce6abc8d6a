"""
Notification SDK.

Stand-in for the external provider library the gateway talks to:
- Providers per channel (simulated here)
- NotificationService with retry policy and a background thread pool
- Lifecycle event bus with Sent / Failed / Retry events
"""

from notify.event_bus import EventBus, NotificationEvent
from notify.events import (
    EventTypes,
    NotificationSentEvent,
    NotificationFailedEvent,
    NotificationRetryEvent,
)
from notify.exceptions import NotificationError, NotificationValidationError, ProviderError
from notify.providers import (
    ChannelType,
    Recipient,
    Notification,
    NotificationResult,
    NotificationProvider,
    SimulatedProvider,
)
from notify.service import NotificationService, NotifyConfig, RetryPolicy

__all__ = [
    "EventBus",
    "NotificationEvent",
    "EventTypes",
    "NotificationSentEvent",
    "NotificationFailedEvent",
    "NotificationRetryEvent",
    "NotificationError",
    "NotificationValidationError",
    "ProviderError",
    "ChannelType",
    "Recipient",
    "Notification",
    "NotificationResult",
    "NotificationProvider",
    "SimulatedProvider",
    "NotificationService",
    "NotifyConfig",
    "RetryPolicy",
]
