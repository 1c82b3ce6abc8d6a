"""
Per-channel notification dispatcher.

Translates a Transaction into an SDK Notification and sends it on one
channel, either synchronously or fire-and-forget.

Design decisions:
- One class for every channel; what differs (provider label, required
  recipient field, extra metadata) is a ChannelCapability value
- The notification id is the transaction id, so lifecycle events published
  by the SDK can be matched back to the transaction
- send_sync() never touches the status store and lets every SDK exception
  through to the caller
- send_async() never raises. If submission fails, or the SDK future ends
  in an exception (validation failures publish no event), the dispatcher
  writes the FAILED record itself. Results that came back from a provider
  are left to the audit listener, which gets the lifecycle event.
- DispatchHandle has no blocking accessor, so batch code can't wait on it
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from functools import partial
from typing import Optional

from domain.models import Channel, DeliveryStatusRecord, NotificationOutcome, Transaction
from domain.status_store import StatusStore
from notify.providers import ChannelType, Notification, NotificationResult, Recipient
from notify.service import NotificationService

logger = logging.getLogger("dispatcher")

UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class ChannelCapability:
    """
    What makes one channel different from another.

    Attributes:
        channel: The channel this capability describes
        label: Provider label used on records the dispatcher writes itself
        required_field: Transaction attribute the channel can't send without
    """
    channel: Channel
    label: str
    required_field: str

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType(self.channel.value)

    def is_reachable(self, transaction: Transaction) -> bool:
        """True if the transaction has a non-blank value for the required field."""
        value = getattr(transaction, self.required_field)
        return bool(value and value.strip())


CAPABILITIES: dict[Channel, ChannelCapability] = {
    Channel.EMAIL: ChannelCapability(Channel.EMAIL, label="email", required_field="email"),
    Channel.SMS: ChannelCapability(Channel.SMS, label="sms", required_field="phone"),
    Channel.PUSH: ChannelCapability(Channel.PUSH, label="push", required_field="device_token"),
}


class DispatchHandle:
    """
    Receipt for a fire-and-forget dispatch.

    Deliberately exposes no result() or wait(): the outcome shows up in the
    status store, not here.
    """

    __slots__ = ("transaction_id", "channel", "_future")

    def __init__(self, transaction_id: str, channel: Channel, future: Optional[Future] = None):
        self.transaction_id = transaction_id
        self.channel = channel
        self._future = future

    def done(self) -> bool:
        """True once the SDK has finished with this dispatch (never blocks)."""
        return self._future is None or self._future.done()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"DispatchHandle({self.transaction_id}, {self.channel.value}, {state})"


class NotificationDispatcher:
    """
    Sends transaction notifications on a single channel.

    Example:
        push = NotificationDispatcher(Channel.PUSH, push_service, status_store)
        push.send_async(transaction, "Transaction tx-1 PROCESSING")
    """

    def __init__(
        self,
        channel: Channel,
        notification_service: NotificationService,
        status_store: Optional[StatusStore] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            channel: Channel to send on
            notification_service: SDK service configured with a provider for that channel
            status_store: Where the async fallback records failures
        """
        self.capability = CAPABILITIES[channel]
        self.notification_service = notification_service
        self.status_store = status_store
        self._tag = f"[{channel.value.upper()}-DISPATCH]"

    @property
    def channel(self) -> Channel:
        return self.capability.channel

    # =========================================================================
    # Sending
    # =========================================================================

    def send_sync(self, transaction: Transaction, message: str) -> NotificationOutcome:
        """
        Send and wait for the provider.

        Raises:
            NotificationError: Whatever the SDK raised, unmodified
        """
        logger.info(f"{self._tag} Processing notification for transaction {transaction.id}")
        notification = self._build_notification(transaction, message)

        result = self.notification_service.send(notification, self.capability.channel_type)

        logger.info(
            f"{self._tag} Notification for {transaction.id} sent. "
            f"Status: {'SUCCESS' if result.success else 'FAILED'}"
        )
        return self._to_outcome(result)

    def send_async(self, transaction: Transaction, message: str) -> DispatchHandle:
        """
        Submit the notification and return immediately.

        Never raises; failures end up as a FAILED record in the status store.
        """
        logger.info(f"{self._tag} Dispatching async notification for transaction {transaction.id}")

        try:
            notification = self._build_notification(transaction, message)
            future = self.notification_service.send_async(notification, self.capability.channel_type)
        except Exception as e:
            logger.error(f"{self._tag} Submission failed for transaction {transaction.id}: {e}")
            self._record_failure(transaction.id, e)
            return DispatchHandle(transaction.id, self.channel)

        future.add_done_callback(partial(self._on_async_done, transaction.id))
        return DispatchHandle(transaction.id, self.channel, future)

    # =========================================================================
    # Internals
    # =========================================================================

    def _build_notification(self, transaction: Transaction, message: str) -> Notification:
        if not self.capability.is_reachable(transaction):
            logger.warning(
                f"{self._tag} Transaction {transaction.id} has no {self.capability.required_field}, "
                "the notification is likely to fail"
            )

        metadata = {"customer_name": transaction.customer_name}
        if self.channel is Channel.PUSH:
            metadata["device_token"] = transaction.device_token or ""

        recipient = Recipient(email=transaction.email, phone=transaction.phone, metadata=metadata)
        return Notification(id=transaction.id, recipient=recipient, message=message)

    def _on_async_done(self, transaction_id: str, future: Future) -> None:
        # Runs on an SDK worker thread, or inline if the future was already done
        try:
            result = future.result()
        except Exception as e:
            logger.error(f"{self._tag} Exception in async notification for {transaction_id}: {e}")
            self._record_failure(transaction_id, e)
            return

        if result.success:
            logger.info(
                f"{self._tag} Async notification dispatched for {transaction_id}. "
                "Final status comes from the audit listener."
            )
        else:
            logger.warning(
                f"{self._tag} Async notification failed for {transaction_id}: {result.error_message}"
            )

    def _record_failure(self, transaction_id: str, error: BaseException) -> None:
        error_message = str(error) or UNKNOWN_ERROR
        if self.status_store is None:
            logger.error(f"{self._tag} No status store, can't record failure for {transaction_id}")
            return

        outcome = NotificationOutcome.failed(
            message_id=transaction_id,
            provider=self.capability.label,
            error_message=error_message,
        )
        self.status_store.save(DeliveryStatusRecord.failed(transaction_id, outcome))
        logger.info(f"{self._tag} Updated {transaction_id} to FAILED with error: {error_message}")

    @staticmethod
    def _to_outcome(result: NotificationResult) -> NotificationOutcome:
        return NotificationOutcome(
            success=result.success,
            message_id=result.notification_id,
            provider=result.provider_name,
            error_message=result.error_message,
        )
