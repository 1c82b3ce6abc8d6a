"""
Delivery status store.

Keeps the latest DeliveryStatusRecord per transaction id. Three independent
writers use it: the batch orchestrator (PROCESSING), the audit listener
(terminal states from provider events) and the dispatcher fallback (FAILED on
submission errors). Readers are the status lookup endpoint and tests.

Design decisions:
- In-memory dict guarded by a lock; each save is atomic per id
- Upsert, last write wins, no version check or compare-and-swap
- Optional sticky terminal states: once COMPLETED/FAILED is stored, later
  writes for that id are rejected
- StatusStore protocol is the persistence port; a durable store only needs
  save() and find_by_id()
"""

import logging
import threading
from typing import Optional, Protocol

from domain.models import DeliveryStatusRecord

logger = logging.getLogger("status_store")


class StatusStore(Protocol):
    """Persistence port for delivery status records."""

    def save(self, record: DeliveryStatusRecord) -> bool:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, transaction_id: str) -> Optional[DeliveryStatusRecord]:  # pragma: no cover - Protocol
        ...


class InMemoryStatusStore:
    """
    Thread-safe in-memory status store.

    Safe under any number of concurrent writers without external locking.
    The store does not order writers: whoever saves last for an id wins,
    unless sticky_terminal_states is enabled.
    """

    def __init__(self, sticky_terminal_states: bool = False):
        """
        Initialize the store.

        Args:
            sticky_terminal_states: Reject writes for ids whose stored record
                is already COMPLETED or FAILED.
        """
        self.sticky_terminal_states = sticky_terminal_states
        self._records: dict[str, DeliveryStatusRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: DeliveryStatusRecord) -> bool:
        """
        Upsert a record.

        Returns:
            True if the record was stored, False if sticky mode rejected it.
        """
        with self._lock:
            current = self._records.get(record.id)
            if self.sticky_terminal_states and current is not None and current.is_terminal:
                rejected = True
            else:
                self._records[record.id] = record
                rejected = False

        if rejected:
            logger.warning(
                f"Ignoring {record.status.value} for {record.id}: "
                f"already terminal ({current.status.value})"
            )
            return False

        logger.debug(f"Saved {record.id} -> {record.status.value}")
        return True

    def find_by_id(self, transaction_id: str) -> Optional[DeliveryStatusRecord]:
        """Get the latest record for a transaction, or None if never dispatched."""
        with self._lock:
            return self._records.get(transaction_id)

    def count(self) -> int:
        """Number of transactions with a record."""
        with self._lock:
            return len(self._records)

    def ids(self) -> list[str]:
        """Snapshot of all tracked transaction ids."""
        with self._lock:
            return list(self._records)
