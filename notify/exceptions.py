"""
Exceptions raised by the notification SDK.

- NotificationValidationError: the notification can't be sent as built
  (missing channel-required field, empty message, no provider). Never
  retried and never produces a lifecycle event.
- ProviderError: the provider failed to deliver. Retried according to the
  retry policy; the last failure produces a NotificationFailedEvent.
"""


class NotificationError(Exception):
    """Base exception for everything the SDK raises."""


class NotificationValidationError(NotificationError):
    """The notification failed validation before reaching a provider."""


class ProviderError(NotificationError):
    """The provider rejected or failed to deliver the notification."""

    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider
