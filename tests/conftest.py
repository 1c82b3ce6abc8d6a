"""
Shared pytest fixtures for the gateway tests.

These fixtures provide provider doubles, sample transactions and a fully
wired gateway, and shut every worker pool down between tests.
"""

import threading
import time
from decimal import Decimal
from typing import Callable, Optional

import pytest

from domain.models import BusinessStatus, Channel, Transaction
from domain.status_store import InMemoryStatusStore
from gateway.config import GatewaySettings
from gateway.container import Gateway, build_gateway
from notify.exceptions import ProviderError
from notify.providers import ChannelType, Notification, NotificationProvider, NotificationResult
from notify.service import RetryPolicy


# =============================================================================
# Provider Doubles
# =============================================================================

class RecordingProvider(NotificationProvider):
    """
    Provider double that remembers every notification it was handed.

    Set `gate` to a threading.Event to hold sends until the test releases
    them, and `error` to make every send raise ProviderError with that
    message.
    """

    def __init__(
        self,
        name: str,
        channel: ChannelType,
        gate: Optional[threading.Event] = None,
        error: Optional[str] = None,
    ):
        self.name = name
        self.channel = channel
        self.gate = gate
        self.error = error
        self.notifications: list[Notification] = []
        self._lock = threading.Lock()

    def send(self, notification: Notification) -> NotificationResult:
        if self.gate is not None and not self.gate.wait(timeout=10):
            raise ProviderError("Gate was never released", provider=self.name)

        with self._lock:
            self.notifications.append(notification)

        if self.error is not None:
            raise ProviderError(self.error, provider=self.name)
        return NotificationResult.succeeded(notification.id, self.name, self.channel)

    @property
    def sent(self) -> list[Notification]:
        with self._lock:
            return list(self.notifications)

    def release(self) -> None:
        if self.gate is not None:
            self.gate.set()


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll until predicate() is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Polling helper for asserting on eventually-consistent state."""
    return wait_for


# =============================================================================
# Providers, Store, Settings
# =============================================================================

@pytest.fixture
def email_provider() -> RecordingProvider:
    return RecordingProvider("sendgrid", ChannelType.EMAIL)


@pytest.fixture
def sms_provider() -> RecordingProvider:
    return RecordingProvider("twilio", ChannelType.SMS)


@pytest.fixture
def push_provider() -> RecordingProvider:
    return RecordingProvider("firebase", ChannelType.PUSH)


@pytest.fixture
def providers(email_provider, sms_provider, push_provider) -> dict[Channel, RecordingProvider]:
    return {
        Channel.EMAIL: email_provider,
        Channel.SMS: sms_provider,
        Channel.PUSH: push_provider,
    }


@pytest.fixture
def status_store() -> InMemoryStatusStore:
    """Fresh status store for each test."""
    return InMemoryStatusStore()


@pytest.fixture
def settings() -> GatewaySettings:
    """Settings that don't depend on the environment."""
    return GatewaySettings(
        email_provider="sendgrid",
        email_api_key="SG_test",
        sms_provider="twilio",
        sms_account_sid="AC_test",
        push_provider="firebase",
        push_server_key="FK_test",
        retry_attempts=1,
        retry_backoff_ms=0,
        max_workers=8,
    )


# =============================================================================
# Gateway
# =============================================================================

@pytest.fixture
def make_gateway(settings, providers, status_store):
    """
    Factory for wired gateways.

    Defaults to the recording providers, a single attempt per send and the
    shared status_store fixture. Every gateway built is shut down after the
    test, with any held provider gates released first.
    """
    built: list[Gateway] = []

    def _make(
        providers_override: Optional[dict] = None,
        retry_policy: Optional[RetryPolicy] = None,
        store: Optional[InMemoryStatusStore] = None,
    ) -> Gateway:
        gateway = build_gateway(
            settings=settings,
            providers=providers_override or providers,
            retry_policy=retry_policy or RetryPolicy.of(1, 0),
            status_store=store or status_store,
        )
        built.append(gateway)
        return gateway

    yield _make

    for provider in providers.values():
        provider.release()
    for gateway in built:
        gateway.shutdown(wait=True)


@pytest.fixture
def gateway(make_gateway) -> Gateway:
    return make_gateway()


# =============================================================================
# Transactions
# =============================================================================

@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory for transactions; any field can be overridden."""
    counter = {"n": 0}

    def _make(status: BusinessStatus = BusinessStatus.PENDING, **overrides) -> Transaction:
        counter["n"] += 1
        n = counter["n"]
        data = {
            "amount": Decimal("1500.00"),
            "customer_name": "Juan Perez",
            "email": f"juan.perez{n}@example.com",
            "phone": "+541112345678",
            "status": status,
            "device_token": f"f_test_device_token_{n}",
        }
        data.update(overrides)
        return Transaction(**data)

    return _make
