"""
Domain models for the transaction notification gateway.

Two independent state machines live here and must not be confused:
- BusinessStatus is what the caller tells us about the transaction
  (COMPLETED / PENDING / REJECTED). It decides the notification channel.
- DeliveryStatus is what we know about the notification we sent
  (PROCESSING / COMPLETED / FAILED). It is tracked in the status store.

Design decisions:
- Using Pydantic for validation and serialization
- All models are frozen; a status change is a new record, not a mutation
- Transaction ids are strings so caller-supplied UUIDs and generated ones
  are handled the same way
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class BusinessStatus(str, Enum):
    """
    Business state of a financial transaction.

    This is an input classification supplied by the caller, not a
    delivery-tracking state.
    """
    COMPLETED = "COMPLETED"     # Payment went through
    PENDING = "PENDING"         # Payment is still being validated
    REJECTED = "REJECTED"       # Payment was rejected


class Channel(str, Enum):
    """Notification transports the gateway can route to."""
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class DeliveryStatus(str, Enum):
    """
    Notification progress for a transaction.

    PROCESSING is the only non-terminal state.
    """
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not DeliveryStatus.PROCESSING


# =============================================================================
# Core Domain Models
# =============================================================================

class Transaction(BaseModel):
    """
    A financial transaction that needs a customer notification.

    The id is either supplied by the caller or generated here; either way it
    becomes the notification id so provider events can be correlated back.
    """
    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique transaction identifier")
    amount: Decimal = Field(..., ge=0, description="Transaction amount")
    customer_name: str = Field(..., description="Customer full name")
    email: str = Field(..., description="Address used by the email channel")
    phone: str = Field(..., description="Number used by the SMS channel")
    status: BusinessStatus = Field(..., description="Business status, drives channel selection")
    device_token: Optional[str] = Field(
        default=None,
        description="Mobile device token, required by the push channel"
    )

    model_config = ConfigDict(frozen=True)


class NotificationOutcome(BaseModel):
    """Result of one send attempt as seen by the gateway."""
    success: bool
    message_id: str = Field(..., description="Provider-assigned message id")
    provider: str = Field(..., description="Name of the provider that handled the send")
    error_message: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def succeeded(cls, message_id: str, provider: str) -> "NotificationOutcome":
        return cls(success=True, message_id=message_id, provider=provider)

    @classmethod
    def failed(
        cls,
        message_id: str,
        provider: str,
        error_message: Optional[str],
    ) -> "NotificationOutcome":
        return cls(
            success=False,
            message_id=message_id,
            provider=provider,
            error_message=error_message,
        )


class DeliveryStatusRecord(BaseModel):
    """
    Latest known delivery status for one transaction.

    Keyed by transaction id in the status store. The outcome is empty while
    the notification is still PROCESSING.
    """
    id: str = Field(..., description="Transaction id")
    status: DeliveryStatus
    outcome: Optional[NotificationOutcome] = Field(default=None)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

    @classmethod
    def processing(cls, transaction_id: str) -> "DeliveryStatusRecord":
        """Initial record written when a dispatch is initiated."""
        return cls(id=transaction_id, status=DeliveryStatus.PROCESSING)

    @classmethod
    def completed(cls, transaction_id: str, outcome: NotificationOutcome) -> "DeliveryStatusRecord":
        return cls(id=transaction_id, status=DeliveryStatus.COMPLETED, outcome=outcome)

    @classmethod
    def failed(cls, transaction_id: str, outcome: NotificationOutcome) -> "DeliveryStatusRecord":
        return cls(id=transaction_id, status=DeliveryStatus.FAILED, outcome=outcome)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


class ProcessingResult(BaseModel):
    """What the single-transaction flow hands back to its caller."""
    transaction: Transaction
    outcome: NotificationOutcome
    channel: Channel

    model_config = ConfigDict(frozen=True)
