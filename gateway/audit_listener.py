"""
Transaction audit listener.

Subscribes to the SDK lifecycle event stream of every channel and turns
delivery events into terminal status records. For fire-and-forget
dispatches this is the only path that marks a transaction COMPLETED, and
the normal path that marks it FAILED.

The notification id on each event is the transaction id (the dispatcher
builds notifications that way), so no lookup is needed to correlate.

The listener is stateless apart from the store it writes to; it can be
registered with any number of NotificationService instances.
"""

import logging

from domain.models import DeliveryStatusRecord, NotificationOutcome
from domain.status_store import StatusStore
from notify.event_bus import NotificationEvent
from notify.events import NotificationFailedEvent, NotificationSentEvent

logger = logging.getLogger("audit_listener")


class TransactionAuditListener:
    """
    Writes COMPLETED / FAILED records from lifecycle events.

    Example:
        listener = TransactionAuditListener(status_store)
        NotificationService(NotifyConfig(..., subscribers=[listener.on_event]))
    """

    def __init__(self, status_store: StatusStore):
        self.status_store = status_store

    def on_event(self, event: NotificationEvent) -> None:
        """Handle one lifecycle event. Unknown event types are logged and ignored."""
        logger.info(f"[AUDIT] Received {event.event_type} for notification {event.notification_id}")

        if isinstance(event, NotificationSentEvent):
            self._handle_sent(event)
        elif isinstance(event, NotificationFailedEvent):
            self._handle_failed(event)
        else:
            logger.info(f"[AUDIT-UNKNOWN] Ignoring event type {type(event).__name__}")

    def __call__(self, event: NotificationEvent) -> None:
        self.on_event(event)

    def _handle_sent(self, event: NotificationSentEvent) -> None:
        logger.info(
            f"[AUDIT-SUCCESS] Notification sent. ID: {event.notification_id}, "
            f"Provider: {event.provider}, Channel: {event.channel}"
        )
        outcome = NotificationOutcome.succeeded(message_id=event.notification_id, provider=event.provider)
        self._save(DeliveryStatusRecord.completed(event.notification_id, outcome))

    def _handle_failed(self, event: NotificationFailedEvent) -> None:
        logger.warning(
            f"[AUDIT-FAILURE] Notification failed. ID: {event.notification_id}, "
            f"Provider: {event.provider}, Channel: {event.channel}, "
            f"Error: {event.error_message or 'No error message'}"
        )
        outcome = NotificationOutcome.failed(
            message_id=event.notification_id,
            provider=event.provider,
            error_message=event.error_message,
        )
        self._save(DeliveryStatusRecord.failed(event.notification_id, outcome))

    def _save(self, record: DeliveryStatusRecord) -> None:
        if self.status_store.save(record):
            logger.info(f"[AUDIT] Updated transaction {record.id} to status {record.status.value}")
