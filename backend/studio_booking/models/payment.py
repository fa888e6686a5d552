"""
Payment models for the Stripe integration.

A booking may accumulate several payment attempts (deposit, then the
remaining balance). Each attempt is created PENDING with the gateway's
intent id and only moves forward on gateway-verified outcomes.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.timezone_utils import utc_now
from ..database import Base
from .types import UTCDateTime, new_ulid

if TYPE_CHECKING:
    from .booking import Booking


class PaymentType(str, Enum):
    DEPOSIT = "DEPOSIT"
    FINAL = "FINAL"
    FULL = "FULL"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class Payment(Base):
    """One payment attempt against a booking."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=new_ulid)
    booking_id: Mapped[str] = mapped_column(String(26), ForeignKey("bookings.id"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, comment="Major currency units")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="usd")
    payment_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PaymentStatus.PENDING.value)

    # Gateway references
    stripe_payment_intent_id: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    stripe_charge_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_refund_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    refunded_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    refund_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, onupdate=utc_now)

    booking: Mapped["Booking"] = relationship("Booking", back_populates="payments")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_payment_amount_non_negative"),
        CheckConstraint("payment_type IN ('DEPOSIT', 'FINAL', 'FULL')", name="ck_payments_type"),
        CheckConstraint(
            "status IN ('PENDING', 'PROCESSING', 'SUCCEEDED', 'FAILED', 'REFUNDED')",
            name="ck_payments_status",
        ),
        Index("idx_payments_booking", "booking_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, booking_id={self.booking_id}, type={self.payment_type}, "
            f"amount={self.amount}, status={self.status})>"
        )
