"""
Tests for the in-memory status store.

These tests cover upsert semantics, the optional sticky terminal states
and behaviour under concurrent writers.
"""

import threading

import pytest

from domain.models import DeliveryStatus, DeliveryStatusRecord, NotificationOutcome
from domain.status_store import InMemoryStatusStore


def _completed(transaction_id: str) -> DeliveryStatusRecord:
    return DeliveryStatusRecord.completed(
        transaction_id, NotificationOutcome.succeeded(message_id=transaction_id, provider="firebase"),
    )


def _failed(transaction_id: str, error: str = "boom") -> DeliveryStatusRecord:
    return DeliveryStatusRecord.failed(
        transaction_id, NotificationOutcome.failed(message_id=transaction_id, provider="push", error_message=error),
    )


class TestInMemoryStatusStore:
    """Basic save / find behaviour."""

    def test_find_unknown_id(self, status_store: InMemoryStatusStore):
        assert status_store.find_by_id("nonexistent") is None

    def test_save_and_find(self, status_store: InMemoryStatusStore):
        record = DeliveryStatusRecord.processing("tx-1")

        assert status_store.save(record) is True
        assert status_store.find_by_id("tx-1") == record

    def test_last_write_wins(self, status_store: InMemoryStatusStore):
        status_store.save(DeliveryStatusRecord.processing("tx-1"))
        status_store.save(_completed("tx-1"))
        status_store.save(_failed("tx-1"))

        assert status_store.find_by_id("tx-1").status is DeliveryStatus.FAILED
        assert status_store.count() == 1

    def test_terminal_can_be_overwritten_by_default(self, status_store: InMemoryStatusStore):
        status_store.save(_completed("tx-1"))
        status_store.save(DeliveryStatusRecord.processing("tx-1"))

        assert status_store.find_by_id("tx-1").status is DeliveryStatus.PROCESSING

    def test_ids_snapshot(self, status_store: InMemoryStatusStore):
        status_store.save(DeliveryStatusRecord.processing("a"))
        status_store.save(DeliveryStatusRecord.processing("b"))

        ids = status_store.ids()
        status_store.save(DeliveryStatusRecord.processing("c"))

        assert sorted(ids) == ["a", "b"]
        assert status_store.count() == 3


class TestStickyTerminalStates:
    """With sticky_terminal_states, COMPLETED/FAILED are final."""

    @pytest.fixture
    def store(self) -> InMemoryStatusStore:
        return InMemoryStatusStore(sticky_terminal_states=True)

    def test_processing_can_become_terminal(self, store):
        store.save(DeliveryStatusRecord.processing("tx-1"))

        assert store.save(_completed("tx-1")) is True
        assert store.find_by_id("tx-1").status is DeliveryStatus.COMPLETED

    def test_terminal_write_is_rejected(self, store):
        store.save(_completed("tx-1"))

        assert store.save(_failed("tx-1")) is False
        assert store.save(DeliveryStatusRecord.processing("tx-1")) is False
        assert store.find_by_id("tx-1").status is DeliveryStatus.COMPLETED


class TestConcurrency:
    """The store needs no external locking."""

    def test_concurrent_writers_distinct_ids(self, status_store: InMemoryStatusStore):
        def writer(offset: int):
            for i in range(200):
                status_store.save(DeliveryStatusRecord.processing(f"tx-{offset}-{i}"))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert status_store.count() == 2000

    def test_concurrent_writers_same_id(self, status_store: InMemoryStatusStore):
        """Every write is atomic: the stored record is always one of the written ones."""
        records = [_completed("tx-1"), _failed("tx-1"), DeliveryStatusRecord.processing("tx-1")]

        def writer(record):
            for _ in range(500):
                status_store.save(record)

        threads = [threading.Thread(target=writer, args=(r,)) for r in records]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert status_store.find_by_id("tx-1") in records
        assert status_store.count() == 1
