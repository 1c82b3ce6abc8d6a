"""
Tests for the simulated notification providers.
"""

import pytest

from notify.exceptions import ProviderError
from notify.providers import ChannelType, Notification, NotificationResult, Recipient, SimulatedProvider


def _notification(message: str = "Payment successful!", **metadata) -> Notification:
    return Notification(
        id="tx-1",
        recipient=Recipient(email="juan@example.com", phone="+541112345678", metadata=metadata),
        message=message,
    )


class TestRecipient:
    """Tests for recipient field lookup."""

    def test_get_falls_back_to_metadata(self):
        recipient = Recipient(email="a@example.com", metadata={"device_token": "tok"})

        assert recipient.get("email") == "a@example.com"
        assert recipient.get("phone") is None
        assert recipient.get("device_token") == "tok"
        assert recipient.get("missing") is None


class TestSimulatedProvider:
    """Tests for the simulated provider."""

    def test_send_success(self):
        provider = SimulatedProvider("sendgrid", ChannelType.EMAIL, credential="SG_secret")

        result = provider.send(_notification())

        assert result.success is True
        assert result.notification_id == "tx-1"
        assert result.provider_name == "sendgrid"
        assert result.channel == ChannelType.EMAIL

    def test_supports_only_its_channel(self):
        provider = SimulatedProvider("twilio", ChannelType.SMS)

        assert provider.supports(ChannelType.SMS) is True
        assert provider.supports(ChannelType.EMAIL) is False

    def test_tracks_sent_messages(self):
        provider = SimulatedProvider("firebase", ChannelType.PUSH)
        provider.send(_notification(device_token="tok"))
        provider.send(_notification(device_token="tok"))

        assert provider.get_sent_count() == 2
        assert len(provider.get_successful_sends()) == 2

    def test_history_is_bounded(self):
        provider = SimulatedProvider("firebase", ChannelType.PUSH, history_size=10)

        for _ in range(300):
            provider.send(_notification(device_token="tok"))

        assert provider.get_sent_count() == 10

    def test_failure_raises_provider_error(self):
        provider = SimulatedProvider("twilio", ChannelType.SMS, fail_rate=1.0)

        with pytest.raises(ProviderError) as exc_info:
            provider.send(_notification())

        assert exc_info.value.provider == "twilio"
        assert "sms" in str(exc_info.value)
        assert provider.get_sent_count() == 1
        assert provider.get_successful_sends() == []

    def test_custom_failure_message(self):
        provider = SimulatedProvider("firebase", ChannelType.PUSH, fail_rate=1.0, error_message="X")

        with pytest.raises(ProviderError, match="^X$"):
            provider.send(_notification(device_token="tok"))

    def test_long_sms_still_sent(self):
        provider = SimulatedProvider("twilio", ChannelType.SMS)

        result = provider.send(_notification(message="x" * 200))

        assert result.success is True


class TestNotificationResult:
    """Tests for NotificationResult."""

    def test_str(self):
        ok = NotificationResult.succeeded("tx-1", "twilio", ChannelType.SMS)
        failed = NotificationResult.failed("tx-1", "twilio", ChannelType.SMS, "boom")

        assert str(ok).startswith("✓ SMS")
        assert str(failed).startswith("✗ SMS")
        assert failed.error_message == "boom"
