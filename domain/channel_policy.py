"""
Channel selection policy.

Business rules:
- COMPLETED -> EMAIL: formal confirmation of a successful payment
- PENDING   -> PUSH:  non-blocking status update while the payment settles
- REJECTED  -> SMS:   immediate alert that needs the customer's attention

The mapping is checked for completeness when this module is imported, so a
new BusinessStatus member without a channel fails loudly at startup instead
of being routed to some default.
"""

from domain.models import BusinessStatus, Channel


CHANNEL_BY_STATUS: dict[BusinessStatus, Channel] = {
    BusinessStatus.COMPLETED: Channel.EMAIL,
    BusinessStatus.PENDING: Channel.PUSH,
    BusinessStatus.REJECTED: Channel.SMS,
}


def _check_exhaustive() -> None:
    missing = [status.value for status in BusinessStatus if status not in CHANNEL_BY_STATUS]
    if missing:
        raise RuntimeError(f"No channel mapped for business status(es): {', '.join(missing)}")


_check_exhaustive()


def select_channel(status: BusinessStatus) -> Channel:
    """Pick the delivery channel for a transaction's business status."""
    return CHANNEL_BY_STATUS[status]
