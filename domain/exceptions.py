"""Gateway-side exceptions."""

from domain.models import Channel


class BusinessError(Exception):
    """Base exception for business-related errors in the gateway."""


class DispatcherNotConfiguredError(BusinessError):
    """Raised when the channel policy selects a channel nobody can send on."""

    def __init__(self, channel: Channel) -> None:
        super().__init__(f"No dispatcher configured for channel '{channel.value}'")
        self.channel = channel
