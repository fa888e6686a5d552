# backend/studio_booking/models/booking.py
"""
Booking model for the studio booking backend.

A booking reserves a studio (optionally one room) for an absolute UTC
interval. Amounts are computed once at creation and never recalculated.
Bookings are never deleted: cancellation and no-shows are statuses.

Selected add-on services are snapshotted as BookingServiceItem rows so the
price a client agreed to survives later catalog edits.
"""

from datetime import datetime
from enum import Enum
import logging
from typing import Any, Dict, FrozenSet

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .types import UTCDateTime, new_ulid

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"  # Awaiting deposit
    CONFIRMED = "CONFIRMED"  # Deposit paid or not required
    IN_PROGRESS = "IN_PROGRESS"  # Session running
    COMPLETED = "COMPLETED"  # Session finished
    CANCELLED = "CANCELLED"  # Cancelled before the session
    NO_SHOW = "NO_SHOW"  # Client didn't attend


# Statuses that hold their time block against new bookings
ACTIVE_BOOKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)

TERMINAL_BOOKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
)

# Staff-driven transitions. PENDING -> CONFIRMED happens only when a deposit
# payment settles (Booking.mark_deposit_paid).
ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {
            BookingStatus.IN_PROGRESS,
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
            BookingStatus.NO_SHOW,
        }
    ),
    BookingStatus.CONFIRMED: frozenset(
        {
            BookingStatus.IN_PROGRESS,
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
            BookingStatus.NO_SHOW,
        }
    ),
    BookingStatus.IN_PROGRESS: frozenset(
        {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}


class Booking(Base):
    """
    A client's reservation of studio time.

    Attributes:
        id: ULID primary key
        studio_id / client_id / room_id: Ownership; room_id None means the whole studio
        start_time / end_time: Absolute UTC interval
        total_amount / deposit_amount: Computed at creation, immutable
        deposit_paid / final_paid: Settlement flags set by confirmed payments
        status: Lifecycle state (see ALLOWED_TRANSITIONS)
        notes: Client-supplied notes
        internal_notes: Staff notes, also records cancellation rationale
        cancelled_at: When the booking was cancelled
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=new_ulid)
    studio_id = Column(String(26), ForeignKey("studios.id"), nullable=False)
    client_id = Column(String(26), ForeignKey("clients.id"), nullable=False, index=True)
    room_id = Column(String(26), ForeignKey("rooms.id"), nullable=True)

    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)

    total_amount = Column(Numeric(10, 2), nullable=False)
    deposit_amount = Column(Numeric(10, 2), nullable=False, default=0)
    deposit_paid = Column(Boolean, nullable=False, default=False)
    final_paid = Column(Boolean, nullable=False, default=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)

    notes = Column(Text, nullable=True)
    internal_notes = Column(Text, nullable=True)
    cancelled_at = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)
    updated_at = Column(UTCDateTime, onupdate=func.now(), nullable=True)

    # Relationships
    studio = relationship("Studio", back_populates="bookings")
    client = relationship("Client", back_populates="bookings")
    room = relationship("Room")
    service_items = relationship(
        "BookingServiceItem", back_populates="booking", cascade="all, delete-orphan"
    )
    payments = relationship("Payment", back_populates="booking", order_by="Payment.created_at.desc()")
    review = relationship("Review", back_populates="booking", uselist=False)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_booking_time_order"),
        CheckConstraint("total_amount >= 0", name="check_booking_total_non_negative"),
        CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED', 'NO_SHOW')",
            name="ck_bookings_status",
        ),
        Index("idx_bookings_studio_start", "studio_id", "start_time"),
        Index("idx_bookings_studio_room_time", "studio_id", "room_id", "start_time", "end_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: studio={self.studio_id}, room={self.room_id}, "
            f"time={self.start_time}-{self.end_time}, status={self.status}>"
        )

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @property
    def is_active(self) -> bool:
        return self.status in {s.value for s in ACTIVE_BOOKING_STATUSES}

    def can_transition_to(self, new_status: BookingStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[BookingStatus(self.status)]

    def cancel(self, cancelled_at: datetime, internal_notes: str) -> None:
        """Mark booking as cancelled with the computed rationale."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = cancelled_at
        self.internal_notes = internal_notes

    def mark_deposit_paid(self) -> None:
        """Record a settled deposit; a PENDING booking becomes CONFIRMED."""
        self.deposit_paid = True
        if self.status == BookingStatus.PENDING.value:
            self.status = BookingStatus.CONFIRMED.value

    def mark_final_paid(self) -> None:
        self.final_paid = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "studio_id": self.studio_id,
            "client_id": self.client_id,
            "room_id": self.room_id,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "total_amount": float(self.total_amount),
            "deposit_amount": float(self.deposit_amount),
            "deposit_paid": self.deposit_paid,
            "final_paid": self.final_paid,
            "status": self.status,
        }


class BookingServiceItem(Base):
    """Add-on service attached to a booking with its price at booking time."""

    __tablename__ = "booking_services"

    id = Column(String(26), primary_key=True, default=new_ulid)
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(String(26), ForeignKey("studio_services.id"), nullable=False)
    # Snapshot; catalog prices may change later
    price = Column(Numeric(10, 2), nullable=False)
    name = Column(String(200), nullable=True)

    booking = relationship("Booking", back_populates="service_items")
    service = relationship("StudioService")

    __table_args__ = (Index("idx_booking_services_booking", "booking_id"),)
