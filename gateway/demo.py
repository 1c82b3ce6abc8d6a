"""
Demonstration scripts for the gateway.

These functions run the two processing flows against simulated providers.
Run them to see channels being picked, lifecycle events being published and
status records changing.
"""

import logging
import time
from decimal import Decimal

from domain.models import BusinessStatus, Channel, DeliveryStatus, Transaction
from gateway.config import get_settings
from gateway.container import build_gateway
from notify.providers import ChannelType

# Configure logging to see what's happening
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)


def _sample_transaction(status: BusinessStatus, index: int = 1, device_token: str = "f_demo_device_token") -> Transaction:
    return Transaction(
        amount=Decimal("1500.00") + index,
        customer_name=f"Customer {index}",
        email=f"customer{index}@example.com",
        phone=f"+5411{index:08d}",
        status=status,
        device_token=device_token or None,
    )


def run_single_demo(status: BusinessStatus) -> None:
    """
    Demonstrate the single-transaction flow.

    This shows:
    1. The channel is picked from the business status
    2. The notification is sent synchronously
    3. The provider's outcome comes straight back to the caller
    """
    print("\n" + "=" * 70)
    print(f"SINGLE TRANSACTION DEMO: {status.value}")
    print("=" * 70 + "\n")

    gateway = build_gateway()
    try:
        result = gateway.process(_sample_transaction(status))

        print("\n" + "-" * 70)
        print(f"Channel:  {result.channel.value}")
        print(f"Provider: {result.outcome.provider}")
        print(f"Success:  {result.outcome.success}")
        print("-" * 70)
    finally:
        gateway.shutdown(wait=True)


def run_batch_demo(count: int = 5, missing_token_every: int = 0, timeout: float = 30.0) -> None:
    """
    Demonstrate the fire-and-forget batch flow.

    This shows:
    1. Every transaction is registered as PROCESSING and the ids return at once
    2. Push notifications are delivered in the background
    3. The audit listener (or the dispatcher fallback) moves each id to a
       terminal state

    Args:
        count: Number of transactions in the batch
        missing_token_every: Leave out the device token on every Nth
            transaction (0 disables), to show the FAILED path
            (GATEWAY_PUSH_FAIL_RATE shows provider failures the same way)
        timeout: Seconds to wait for every record to settle
    """
    print("\n" + "=" * 70)
    print(f"BATCH DEMO: {count} transaction(s)")
    print("=" * 70 + "\n")

    transactions = []
    for i in range(1, count + 1):
        without_token = missing_token_every > 0 and i % missing_token_every == 0
        transactions.append(_sample_transaction(
            BusinessStatus.PENDING,
            index=i,
            device_token="" if without_token else f"f_demo_device_token_{i}",
        ))

    gateway = build_gateway()
    try:
        ids = gateway.process_batch(transactions)

        print("\n" + "-" * 70)
        print("Right after process_batch() returned:")
        for transaction_id in ids:
            print(f"  {transaction_id}: {gateway.get_status(transaction_id).status.value}")
        print("-" * 70 + "\n")

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if all(gateway.get_status(i).status is not DeliveryStatus.PROCESSING for i in ids):
                break
            time.sleep(0.1)

        print("\n" + "-" * 70)
        print("Final statuses:")
        for transaction_id in ids:
            record = gateway.get_status(transaction_id)
            error = f" ({record.outcome.error_message})" if record.outcome and record.outcome.error_message else ""
            print(f"  {transaction_id}: {record.status.value}{error}")

        push = gateway.notification_services[Channel.PUSH].config.providers[ChannelType.PUSH]
        print(f"\nPush provider: {len(push.get_successful_sends())} delivered, {push.get_sent_count()} attempted")
        print("-" * 70)
    finally:
        gateway.shutdown(wait=True)
