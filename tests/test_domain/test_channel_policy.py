"""
Tests for the channel selection policy.
"""

import pytest

from domain.channel_policy import CHANNEL_BY_STATUS, select_channel
from domain.models import BusinessStatus, Channel


class TestSelectChannel:
    """Each business status maps to exactly one channel."""

    @pytest.mark.parametrize(
        "status, channel",
        [
            (BusinessStatus.COMPLETED, Channel.EMAIL),
            (BusinessStatus.PENDING, Channel.PUSH),
            (BusinessStatus.REJECTED, Channel.SMS),
        ],
    )
    def test_status_to_channel(self, status, channel):
        assert select_channel(status) is channel

    def test_every_status_is_mapped(self):
        """A new status without a channel would fail at import time."""
        assert set(CHANNEL_BY_STATUS) == set(BusinessStatus)

    def test_accepts_raw_string_status(self):
        """BusinessStatus is a str enum, so parsed values work as keys."""
        assert select_channel(BusinessStatus("REJECTED")) is Channel.SMS

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValueError):
            select_channel(BusinessStatus("REFUNDED"))
