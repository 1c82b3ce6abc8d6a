"""
Wiring for the gateway.

Builds one NotificationService per channel (each with its own provider,
the shared retry policy and the audit listener as subscriber), a dispatcher
per channel, the two orchestrators and the status store they share.

The Gateway object is also the inbound facade: process(), process_batch()
and get_status() are what the HTTP layer and the CLI call.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from domain.models import Channel, DeliveryStatusRecord, ProcessingResult, Transaction
from domain.status_store import InMemoryStatusStore, StatusStore
from gateway.audit_listener import TransactionAuditListener
from gateway.batch_service import BatchTransactionService
from gateway.config import GatewaySettings, get_settings
from gateway.dispatcher import NotificationDispatcher
from gateway.transaction_service import TransactionService
from notify.providers import ChannelType, NotificationProvider, SimulatedProvider
from notify.service import NotificationService, NotifyConfig, RetryPolicy

logger = logging.getLogger("gateway")


@dataclass
class Gateway:
    """Everything the gateway needs at runtime, wired together."""

    status_store: StatusStore
    listener: TransactionAuditListener
    notification_services: dict[Channel, NotificationService]
    dispatchers: dict[Channel, NotificationDispatcher]
    transaction_service: TransactionService
    batch_service: BatchTransactionService

    def process(self, transaction: Transaction) -> ProcessingResult:
        return self.transaction_service.process(transaction)

    def process_batch(self, transactions: Iterable[Transaction]) -> list[str]:
        return self.batch_service.process_batch(transactions)

    def get_status(self, transaction_id: str) -> Optional[DeliveryStatusRecord]:
        return self.status_store.find_by_id(transaction_id)

    def shutdown(self, wait: bool = True) -> None:
        """Shut down every channel's SDK worker pool."""
        for service in self.notification_services.values():
            service.shutdown(wait=wait)


def build_providers(settings: GatewaySettings) -> dict[Channel, NotificationProvider]:
    """Simulated providers named and keyed as configured."""
    providers: dict[Channel, NotificationProvider] = {}
    for channel in Channel:
        channel_settings = settings.for_channel(channel)
        providers[channel] = SimulatedProvider(
            name=channel_settings.provider,
            channel=ChannelType(channel.value),
            credential=channel_settings.credential,
            fail_rate=channel_settings.fail_rate,
        )
    return providers


def build_gateway(
    settings: Optional[GatewaySettings] = None,
    providers: Optional[Mapping[Channel, NotificationProvider]] = None,
    retry_policy: Optional[RetryPolicy] = None,
    status_store: Optional[StatusStore] = None,
) -> Gateway:
    """
    Wire a Gateway.

    Args:
        settings: Defaults to the environment settings
        providers: Provider per channel (defaults to simulated providers from settings)
        retry_policy: Overrides the policy from settings
        status_store: Defaults to an in-memory store
    """
    settings = settings or get_settings()
    providers = dict(providers) if providers is not None else build_providers(settings)
    retry_policy = retry_policy or RetryPolicy.of(settings.retry_attempts, settings.retry_backoff_ms)

    if Channel.PUSH not in providers:
        raise ValueError("A push provider is required for batch processing")

    status_store = status_store or InMemoryStatusStore(
        sticky_terminal_states=settings.sticky_terminal_states,
    )

    listener = TransactionAuditListener(status_store)

    notification_services: dict[Channel, NotificationService] = {}
    dispatchers: dict[Channel, NotificationDispatcher] = {}
    for channel, provider in providers.items():
        service = NotificationService(NotifyConfig(
            providers={ChannelType(channel.value): provider},
            retry_policy=retry_policy,
            subscribers=[listener.on_event],
            max_workers=settings.max_workers,
        ))
        notification_services[channel] = service
        dispatchers[channel] = NotificationDispatcher(channel, service, status_store)

    logger.info(
        f"Gateway ready: channels={sorted(c.value for c in dispatchers)}, "
        f"retry={retry_policy.max_attempts}x/{retry_policy.backoff_ms}ms"
    )
    return Gateway(
        status_store=status_store,
        listener=listener,
        notification_services=notification_services,
        dispatchers=dispatchers,
        transaction_service=TransactionService(dispatchers),
        batch_service=BatchTransactionService(dispatchers[Channel.PUSH], status_store),
    )
