"""Payment ledger DTOs."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.payment import PaymentStatus, PaymentType
from ._strict_base import StrictRequestModel
from .base import Money, StandardizedModel


class PaymentIntentCreate(StrictRequestModel):
    booking_id: str
    payment_type: PaymentType


class PaymentIntentResponse(StandardizedModel):
    payment_id: str
    client_secret: str
    amount: Money


class PaymentConfirmRequest(StrictRequestModel):
    payment_intent_id: str = Field(..., min_length=1)


class PaymentConfirmResponse(StandardizedModel):
    success: bool
    status: PaymentStatus
    payment_id: str


class RefundRequest(StrictRequestModel):
    amount: Optional[Money] = None
    reason: Optional[str] = Field(None, max_length=500)


class PaymentResponse(StandardizedModel):
    id: str
    booking_id: str
    amount: Money
    currency: str
    payment_type: PaymentType
    status: PaymentStatus
    stripe_payment_intent_id: Optional[str] = None
    stripe_charge_id: Optional[str] = None
    stripe_refund_id: Optional[str] = None
    refunded_amount: Optional[Money] = None
    refund_reason: Optional[str] = None
    created_at: datetime
