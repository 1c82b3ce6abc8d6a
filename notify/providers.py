"""
Notification providers.

A provider is the last hop before an external gateway. The simulated
provider here logs the send instead of calling out. In a real system,
providers would integrate with services like:
- Email: SendGrid, AWS SES, Mailgun
- SMS: Twilio, AWS SNS, Vonage
- Push: Firebase Cloud Messaging, APNs

Design decisions:
- One provider per channel, selected by NotificationService
- Providers raise ProviderError on delivery failure; retrying is not their job
- Simulated providers keep a bounded history of recent sends
- Failures can be simulated with a fail rate (GATEWAY_<CHANNEL>_FAIL_RATE)
"""

import logging
import random
import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from notify.exceptions import ProviderError

logger = logging.getLogger("notifications")


class ChannelType(str, Enum):
    """Supported notification channels."""
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


@dataclass(frozen=True)
class Recipient:
    """
    Who a notification goes to.

    Channel-specific data that doesn't fit email/phone (e.g. the push
    device token) lives in metadata.
    """
    email: Optional[str] = None
    phone: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        """Look up a recipient field, falling back to metadata."""
        if name in ("email", "phone"):
            return getattr(self, name)
        return self.metadata.get(name)


@dataclass(frozen=True)
class Notification:
    """A message to deliver. The id is echoed in every lifecycle event."""
    recipient: Recipient
    message: str
    id: str = field(default_factory=lambda: str(uuid4()))


@dataclass
class NotificationResult:
    """
    Result of a notification send.

    Captures success/failure and metadata for debugging and testing.
    """
    success: bool
    notification_id: str
    provider_name: str
    channel: ChannelType
    error_message: Optional[str] = None
    attempts: int = 1
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def succeeded(cls, notification_id: str, provider_name: str, channel: ChannelType, **kwargs: Any) -> "NotificationResult":
        return cls(True, notification_id, provider_name, channel, **kwargs)

    @classmethod
    def failed(
        cls,
        notification_id: str,
        provider_name: str,
        channel: ChannelType,
        error_message: Optional[str],
        **kwargs: Any,
    ) -> "NotificationResult":
        return cls(False, notification_id, provider_name, channel, error_message=error_message, **kwargs)

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        return f"{status} {self.channel.value.upper()} via {self.provider_name}: {self.notification_id}"


class NotificationProvider(ABC):
    """Interface every channel provider implements."""

    name: str
    channel: ChannelType

    def supports(self, channel: ChannelType) -> bool:
        return channel == self.channel

    @abstractmethod
    def send(self, notification: Notification) -> NotificationResult:
        """
        Deliver one notification.

        Raises:
            ProviderError: If the provider couldn't deliver it
        """


def _mask(secret: Optional[str]) -> str:
    if not secret:
        return "-"
    return secret[:4] + "***"


class SimulatedProvider(NotificationProvider):
    """
    Mock provider for any channel.

    Logs sends to console and tracks them in a bounded history.
    Can simulate failures for testing error handling.
    """

    # SMS typically have character limits
    SMS_MAX_LENGTH = 160

    def __init__(
        self,
        name: str,
        channel: ChannelType,
        credential: Optional[str] = None,
        fail_rate: float = 0.0,
        error_message: Optional[str] = None,
        history_size: int = 1000,
    ):
        """
        Initialize the provider.

        Args:
            name: Provider name reported in results and events (e.g. "twilio")
            channel: The only channel this provider serves
            credential: API key / account SID / server key (only logged masked)
            fail_rate: Probability of send failure (0.0 to 1.0), for demos and tests
            error_message: Message used for simulated failures
            history_size: How many recent results to keep (oldest are dropped)
        """
        self.name = name
        self.channel = channel
        self.credential = credential
        self.fail_rate = fail_rate
        self.error_message = error_message or f"Simulated {channel.value} delivery failure"
        self.sent_messages: deque[NotificationResult] = deque(maxlen=history_size)
        self._lock = threading.Lock()

    def send(self, notification: Notification) -> NotificationResult:
        """Send a notification (mock implementation)."""
        if self.channel == ChannelType.SMS and len(notification.message) > self.SMS_MAX_LENGTH:
            logger.warning(
                f"[SMS] Message length ({len(notification.message)}) exceeds {self.SMS_MAX_LENGTH} chars, "
                "may be split into multiple messages"
            )

        tag = self.channel.value.upper()

        if random.random() < self.fail_rate:
            result = NotificationResult.failed(notification.id, self.name, self.channel, self.error_message)
            self._record(result)
            logger.error(f"[{tag} FAILED] {self.name} | id={notification.id} | Error: {self.error_message}")
            raise ProviderError(self.error_message, provider=self.name)

        result = NotificationResult.succeeded(notification.id, self.name, self.channel)
        self._record(result)
        logger.info(
            f"[{tag}] Sending via {self.name} (key {_mask(self.credential)}) "
            f"| To: {self._address(notification)} | {notification.message}"
        )
        return result

    def _address(self, notification: Notification) -> Optional[str]:
        if self.channel == ChannelType.EMAIL:
            return notification.recipient.email
        if self.channel == ChannelType.SMS:
            return notification.recipient.phone
        return _mask(notification.recipient.get("device_token"))

    def _record(self, result: NotificationResult) -> None:
        with self._lock:
            self.sent_messages.append(result)

    def get_sent_count(self) -> int:
        """Number of send attempts still in the history."""
        with self._lock:
            return len(self.sent_messages)

    def get_successful_sends(self) -> list[NotificationResult]:
        with self._lock:
            return [m for m in self.sent_messages if m.success]
