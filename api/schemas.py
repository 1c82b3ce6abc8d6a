"""
HTTP request/response models.

These Pydantic models are the contract between API clients and the
gateway. They are translated to and from the domain models at the edge so
the core never sees HTTP shapes.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from domain.models import (
    BusinessStatus,
    Channel,
    DeliveryStatus,
    DeliveryStatusRecord,
    NotificationOutcome,
    ProcessingResult,
    Transaction,
)


class TransactionRequest(BaseModel):
    """A transaction to process and notify about."""
    id: Optional[str] = Field(
        default=None,
        description="Unique transaction id; generated when omitted",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    amount: Decimal = Field(..., ge=0, description="Transaction amount", examples=["1500.0"])
    customer_name: str = Field(..., description="Customer full name", examples=["Juan Perez"])
    email: str = Field(..., description="Customer email", examples=["juan.perez@example.com"])
    phone: str = Field(..., description="Customer phone", examples=["+541112345678"])
    status: BusinessStatus = Field(..., description="Business status of the transaction")
    device_token: Optional[str] = Field(
        default=None,
        description="Device token for push notifications",
        examples=["f_test_device_token_123456789"],
    )

    def to_domain(self) -> Transaction:
        data = self.model_dump(exclude_none=True)
        return Transaction(**data)


class NotificationSummary(BaseModel):
    """Notification outcome as reported to clients."""
    success: bool
    message_id: str
    provider: str
    error_message: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: NotificationOutcome) -> "NotificationSummary":
        return cls(**outcome.model_dump())


class TransactionResponse(BaseModel):
    """Response for a synchronously processed transaction."""
    id: str
    amount: Decimal
    status: BusinessStatus
    channel: Channel
    notification: NotificationSummary

    @classmethod
    def from_result(cls, result: ProcessingResult) -> "TransactionResponse":
        return cls(
            id=result.transaction.id,
            amount=result.transaction.amount,
            status=result.transaction.status,
            channel=result.channel,
            notification=NotificationSummary.from_outcome(result.outcome),
        )


class TransactionStatusResponse(BaseModel):
    """Delivery status of a dispatched transaction."""
    id: str
    status: DeliveryStatus
    updated_at: datetime
    notification: Optional[NotificationSummary] = None

    @classmethod
    def from_record(cls, record: DeliveryStatusRecord) -> "TransactionStatusResponse":
        return cls(
            id=record.id,
            status=record.status,
            updated_at=record.updated_at,
            notification=NotificationSummary.from_outcome(record.outcome) if record.outcome else None,
        )
