"""
Core domain of the transaction notification gateway.

This package has no knowledge of providers or HTTP:
- Domain models (Transaction, NotificationOutcome, DeliveryStatusRecord, ...)
- Channel selection policy
- Delivery status store
"""

from domain.models import (
    BusinessStatus,
    Channel,
    DeliveryStatus,
    Transaction,
    NotificationOutcome,
    DeliveryStatusRecord,
    ProcessingResult,
)
from domain.channel_policy import select_channel
from domain.status_store import StatusStore, InMemoryStatusStore

__all__ = [
    "BusinessStatus",
    "Channel",
    "DeliveryStatus",
    "Transaction",
    "NotificationOutcome",
    "DeliveryStatusRecord",
    "ProcessingResult",
    "select_channel",
    "StatusStore",
    "InMemoryStatusStore",
]
