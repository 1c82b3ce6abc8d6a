"""
Single-transaction processing.

The caller waits: the channel is picked from the business status, the
notification is sent synchronously and the provider's outcome is returned
directly. Errors propagate to the caller; there is no retry here beyond the
SDK's own retry policy.
"""

import logging
from typing import Mapping

from domain.channel_policy import select_channel
from domain.exceptions import DispatcherNotConfiguredError
from domain.models import BusinessStatus, Channel, ProcessingResult, Transaction
from gateway.dispatcher import NotificationDispatcher

logger = logging.getLogger("transaction_service")


MESSAGES: dict[BusinessStatus, str] = {
    BusinessStatus.COMPLETED: "Payment successful!",
    BusinessStatus.PENDING: "Your payment is being processed.",
    BusinessStatus.REJECTED: "Alert: transaction rejected.",
}


class TransactionService:
    """Processes one transaction and notifies the customer synchronously."""

    def __init__(self, dispatchers: Mapping[Channel, NotificationDispatcher]):
        """
        Args:
            dispatchers: Dispatcher per Channel
        """
        self.dispatchers = dict(dispatchers)

    def process(self, transaction: Transaction) -> ProcessingResult:
        """
        Notify the customer on the channel their transaction's status calls for.

        Raises:
            DispatcherNotConfiguredError: If no dispatcher serves the selected channel
            NotificationError: Whatever the dispatcher raised
        """
        channel = select_channel(transaction.status)
        dispatcher = self.dispatchers.get(channel)
        if dispatcher is None:
            raise DispatcherNotConfiguredError(channel)

        logger.info(f"Processing {transaction.id} ({transaction.status.value}) via {channel.value}")
        outcome = dispatcher.send_sync(transaction, MESSAGES[transaction.status])

        return ProcessingResult(transaction=transaction, outcome=outcome, channel=channel)
