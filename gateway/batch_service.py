"""
Batch transaction processing.

Optimised for volume: every transaction is registered as PROCESSING and
handed to the push dispatcher fire-and-forget, and the ids come back right
away. Final states arrive later through the audit listener (or the
dispatcher's fallback) and can be read from the status store.

Design decisions:
- Push is used for every batch item regardless of business status; it is
  the non-blocking channel meant for high-volume status updates
- The PROCESSING record is written before the dispatch is submitted, so the
  terminal write for the same id always lands after it
- No atomicity across the batch: a failing item never undoes or stops the
  others, it just ends up FAILED in the store
- Nothing here waits on a dispatch
"""

import logging
from typing import Iterable

from domain.models import Channel, DeliveryStatusRecord, Transaction
from domain.status_store import StatusStore
from gateway.dispatcher import NotificationDispatcher

logger = logging.getLogger("batch_service")

BATCH_CHANNEL = Channel.PUSH


class BatchTransactionService:
    """Registers and dispatches a batch of transactions without blocking."""

    def __init__(self, push_dispatcher: NotificationDispatcher, status_store: StatusStore):
        if push_dispatcher.channel is not BATCH_CHANNEL:
            raise ValueError(f"Batch processing needs a {BATCH_CHANNEL.value} dispatcher")
        self.push_dispatcher = push_dispatcher
        self.status_store = status_store

    def process_batch(self, transactions: Iterable[Transaction]) -> list[str]:
        """
        Register and dispatch every transaction.

        Returns:
            Transaction ids, in input order
        """
        transaction_ids = []

        for transaction in transactions:
            transaction_ids.append(transaction.id)
            self.status_store.save(DeliveryStatusRecord.processing(transaction.id))
            self.push_dispatcher.send_async(transaction, f"Transaction {transaction.id} PROCESSING")

        logger.info(f"Batch of {len(transaction_ids)} transaction(s) dispatched")
        return transaction_ids
