"""
Notification SDK entry point.

NotificationService validates a notification, hands it to the provider for
its channel, retries failed attempts and reports the outcome on the
lifecycle event bus.

Two ways to send:
- send(): blocks the caller through every retry. Validation errors and the
  final ProviderError are raised to the caller.
- send_async(): returns a Future immediately; the work runs on the
  service's own thread pool. Validation errors resolve the future with the
  exception (no event is published for them). Provider failures publish
  NotificationFailedEvent and resolve the future with a failed result.

Design decisions:
- Retry policy is attempt count + fixed backoff, owned here, not by callers
- Every attempt that reaches a provider ends in exactly one Sent or Failed
  event; intermediate failures publish Retry events
- Subscribers from the config are registered for all event types
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from notify.event_bus import EventBus, EventHandler
from notify.events import NotificationFailedEvent, NotificationRetryEvent, NotificationSentEvent
from notify.exceptions import NotificationValidationError, ProviderError
from notify.providers import ChannelType, Notification, NotificationProvider, NotificationResult

logger = logging.getLogger("notify_service")


# Recipient field each channel can't do without
REQUIRED_RECIPIENT_FIELDS = {
    ChannelType.EMAIL: "email",
    ChannelType.SMS: "phone",
    ChannelType.PUSH: "device_token",
}


@dataclass(frozen=True)
class RetryPolicy:
    """
    How many times to try a provider and how long to wait in between.

    max_attempts counts the first try: RetryPolicy(2, 1000) means one retry
    after one second.
    """
    max_attempts: int = 1
    backoff_ms: int = 0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_ms < 0:
            raise ValueError("backoff_ms can't be negative")

    @classmethod
    def of(cls, max_attempts: int, backoff_ms: int) -> "RetryPolicy":
        return cls(max_attempts=max_attempts, backoff_ms=backoff_ms)

    @property
    def backoff_seconds(self) -> float:
        return self.backoff_ms / 1000


@dataclass
class NotifyConfig:
    """
    Everything a NotificationService needs.

    Attributes:
        providers: Provider per channel
        retry_policy: Applied to every provider call
        subscribers: Lifecycle event handlers, registered for all events
        max_workers: Size of the thread pool behind send_async()
    """
    providers: dict[ChannelType, NotificationProvider] = field(default_factory=dict)
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    subscribers: list[EventHandler] = field(default_factory=list)
    max_workers: int = 4


class NotificationService:
    """
    Sends notifications through configured providers.

    Example:
        service = NotificationService(NotifyConfig(
            providers={ChannelType.SMS: SimulatedProvider("twilio", ChannelType.SMS)},
            retry_policy=RetryPolicy.of(2, 1000),
            subscribers=[listener.on_event],
        ))
        result = service.send(notification, ChannelType.SMS)
    """

    def __init__(self, config: NotifyConfig, event_bus: Optional[EventBus] = None):
        self.config = config
        self.event_bus = event_bus or EventBus()
        for handler in config.subscribers:
            self.event_bus.subscribe_all(handler)

        self._executor = ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix="notify",
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def send(self, notification: Notification, channel: ChannelType) -> NotificationResult:
        """
        Send and wait for the result.

        Raises:
            NotificationValidationError: If the notification can't be sent on this channel
            ProviderError: If every attempt failed
        """
        provider = self._validate(notification, channel)
        return self._deliver(notification, channel, provider, raise_on_failure=True)

    def send_async(self, notification: Notification, channel: ChannelType) -> "Future[NotificationResult]":
        """
        Submit for background delivery and return immediately.

        Raises:
            RuntimeError: If the service has been shut down
        """
        return self._executor.submit(self._send_in_background, notification, channel)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for in-flight sends."""
        self._executor.shutdown(wait=wait)
        logger.info("NotificationService shut down")

    def __enter__(self) -> "NotificationService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)

    # =========================================================================
    # Internals
    # =========================================================================

    def _send_in_background(self, notification: Notification, channel: ChannelType) -> NotificationResult:
        provider = self._validate(notification, channel)
        return self._deliver(notification, channel, provider, raise_on_failure=False)

    def _validate(self, notification: Notification, channel: ChannelType) -> NotificationProvider:
        provider = self.config.providers.get(channel)
        if provider is None or not provider.supports(channel):
            raise NotificationValidationError(f"No provider configured for channel '{channel.value}'")

        if not notification.message or not notification.message.strip():
            raise NotificationValidationError("Notification message can't be empty")

        required = REQUIRED_RECIPIENT_FIELDS[channel]
        value = notification.recipient.get(required)
        if not value or not value.strip():
            raise NotificationValidationError(
                f"Recipient field '{required}' is required for {channel.value} notifications"
            )
        return provider

    def _deliver(
        self,
        notification: Notification,
        channel: ChannelType,
        provider: NotificationProvider,
        raise_on_failure: bool,
    ) -> NotificationResult:
        policy = self.config.retry_policy
        error_message: Optional[str] = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                result = provider.send(notification)
            except ProviderError as e:
                error_message = str(e)
            else:
                if result.success:
                    result.attempts = attempt
                    self.event_bus.publish(NotificationSentEvent(
                        notification_id=notification.id,
                        provider=provider.name,
                        channel=channel.value,
                    ))
                    return result
                error_message = result.error_message

            if attempt < policy.max_attempts:
                logger.warning(
                    f"Attempt {attempt}/{policy.max_attempts} failed for {notification.id} "
                    f"via {provider.name}: {error_message}"
                )
                self.event_bus.publish(NotificationRetryEvent(
                    notification_id=notification.id,
                    provider=provider.name,
                    channel=channel.value,
                    attempt=attempt,
                    error_message=error_message,
                ))
                time.sleep(policy.backoff_seconds)

        logger.error(
            f"Giving up on {notification.id} via {provider.name} after "
            f"{policy.max_attempts} attempt(s): {error_message}"
        )
        self.event_bus.publish(NotificationFailedEvent(
            notification_id=notification.id,
            provider=provider.name,
            channel=channel.value,
            error_message=error_message,
        ))

        if raise_on_failure:
            raise ProviderError(error_message or "Notification delivery failed", provider=provider.name)
        return NotificationResult.failed(
            notification.id,
            provider.name,
            channel,
            error_message,
            attempts=policy.max_attempts,
        )
