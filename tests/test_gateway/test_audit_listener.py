"""
Tests for the transaction audit listener.
"""

from domain.models import DeliveryStatus, DeliveryStatusRecord
from domain.status_store import InMemoryStatusStore
from gateway.audit_listener import TransactionAuditListener
from notify.events import NotificationFailedEvent, NotificationRetryEvent, NotificationSentEvent


class TestTransactionAuditListener:
    """Lifecycle events become terminal status records."""

    def test_sent_event_marks_completed(self, status_store):
        listener = TransactionAuditListener(status_store)
        status_store.save(DeliveryStatusRecord.processing("tx-1"))

        listener.on_event(NotificationSentEvent(notification_id="tx-1", provider="firebase", channel="push"))

        record = status_store.find_by_id("tx-1")
        assert record.status is DeliveryStatus.COMPLETED
        assert record.outcome.success is True
        assert record.outcome.message_id == "tx-1"
        assert record.outcome.provider == "firebase"

    def test_failed_event_marks_failed(self, status_store):
        listener = TransactionAuditListener(status_store)

        listener.on_event(NotificationFailedEvent(
            notification_id="tx-1", provider="firebase", channel="push", error_message="X",
        ))

        record = status_store.find_by_id("tx-1")
        assert record.status is DeliveryStatus.FAILED
        assert record.outcome.success is False
        assert record.outcome.error_message == "X"

    def test_writes_for_unknown_ids(self, status_store):
        """No PROCESSING record is needed first."""
        TransactionAuditListener(status_store).on_event(
            NotificationSentEvent(notification_id="never-seen", provider="sendgrid", channel="email"),
        )

        assert status_store.find_by_id("never-seen").status is DeliveryStatus.COMPLETED

    def test_other_events_are_ignored(self, status_store):
        listener = TransactionAuditListener(status_store)

        listener.on_event(NotificationRetryEvent(
            notification_id="tx-1", provider="firebase", channel="push", attempt=1, error_message="flaky",
        ))

        assert status_store.find_by_id("tx-1") is None

    def test_is_callable(self, status_store):
        listener = TransactionAuditListener(status_store)

        listener(NotificationSentEvent(notification_id="tx-1", provider="firebase", channel="push"))

        assert status_store.find_by_id("tx-1").status is DeliveryStatus.COMPLETED

    def test_sticky_store_keeps_first_terminal(self):
        store = InMemoryStatusStore(sticky_terminal_states=True)
        listener = TransactionAuditListener(store)

        listener.on_event(NotificationSentEvent(notification_id="tx-1", provider="firebase", channel="push"))
        listener.on_event(NotificationFailedEvent(notification_id="tx-1", provider="firebase", channel="push"))

        assert store.find_by_id("tx-1").status is DeliveryStatus.COMPLETED
