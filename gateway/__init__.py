"""
Notification dispatch and status tracking.

- NotificationDispatcher: sync and fire-and-forget sends per channel
- TransactionAuditListener: turns lifecycle events into status records
- TransactionService / BatchTransactionService: the two processing flows
- build_gateway(): wires everything from settings
"""

from gateway.audit_listener import TransactionAuditListener
from gateway.batch_service import BatchTransactionService
from gateway.container import Gateway, build_gateway
from gateway.dispatcher import DispatchHandle, NotificationDispatcher
from gateway.transaction_service import TransactionService

__all__ = [
    "TransactionAuditListener",
    "BatchTransactionService",
    "Gateway",
    "build_gateway",
    "DispatchHandle",
    "NotificationDispatcher",
    "TransactionService",
]
