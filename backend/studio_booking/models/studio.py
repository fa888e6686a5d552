# backend/studio_booking/models/studio.py
"""
Studio models.

A Studio owns its pricing, buffer and cancellation policy together with the
rooms and optional add-on services clients can book. Studios are mutated by
settings operations and are never deleted while bookings reference them.

Classes:
    Studio: Bookable studio with pricing and policy settings
    Room: Optional bookable space inside a studio
    StudioService: Priced add-on service offered by a studio
"""

from decimal import Decimal
from enum import Enum
import logging
from typing import Any, Dict

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .types import UTCDateTime, new_ulid

logger = logging.getLogger(__name__)


class DepositType(str, Enum):
    """How ``Studio.deposit_amount`` is interpreted."""

    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class ServiceCategory(str, Enum):
    RECORDING = "RECORDING"
    MIXING = "MIXING"
    MASTERING = "MASTERING"
    PRODUCTION = "PRODUCTION"
    OTHER = "OTHER"


class Studio(Base):
    """Recording studio with booking policy settings."""

    __tablename__ = "studios"

    id = Column(String(26), primary_key=True, index=True, default=new_ulid)
    # Owner accounts live outside this service; kept as an opaque reference
    owner_id = Column(String(64), nullable=True, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    address = Column(String(500), nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=False)
    timezone = Column(String(64), nullable=False, default="America/New_York")

    # Pricing and scheduling policy
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=Decimal("100.00"))
    booking_buffer_minutes = Column(Integer, nullable=False, default=15)
    min_booking_minutes = Column(Integer, nullable=False, default=60)
    max_booking_minutes = Column(Integer, nullable=False, default=480)

    # Deposit policy
    require_deposit = Column(Boolean, nullable=False, default=True)
    deposit_type = Column(String(20), nullable=False, default=DepositType.PERCENTAGE.value)
    deposit_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("50.00"))

    # Cancellation policy
    cancellation_hours = Column(Integer, nullable=False, default=24)
    cancellation_fee_percent = Column(Numeric(5, 2), nullable=False, default=Decimal("50.00"))

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    # Relationships
    rooms = relationship("Room", back_populates="studio", cascade="all, delete-orphan")
    services = relationship("StudioService", back_populates="studio", cascade="all, delete-orphan")
    availability_rules = relationship(
        "AvailabilityRule",
        back_populates="studio",
        cascade="all, delete-orphan",
        order_by="AvailabilityRule.day_of_week",
    )
    bookings = relationship("Booking", back_populates="studio")
    clients = relationship("Client", back_populates="studio")

    __table_args__ = (
        CheckConstraint("hourly_rate >= 0", name="check_studio_rate_non_negative"),
        CheckConstraint("booking_buffer_minutes >= 0", name="check_studio_buffer_non_negative"),
        CheckConstraint(
            "min_booking_minutes <= max_booking_minutes", name="check_studio_min_le_max"
        ),
        CheckConstraint(
            "deposit_type IN ('PERCENTAGE', 'FIXED')", name="ck_studios_deposit_type"
        ),
    )

    def __repr__(self) -> str:
        return f"<Studio {self.id}: {self.name}>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timezone": self.timezone,
            "hourly_rate": float(self.hourly_rate),
            "booking_buffer_minutes": self.booking_buffer_minutes,
            "min_booking_minutes": self.min_booking_minutes,
            "max_booking_minutes": self.max_booking_minutes,
            "require_deposit": self.require_deposit,
            "deposit_type": self.deposit_type,
            "deposit_amount": float(self.deposit_amount),
            "cancellation_hours": self.cancellation_hours,
            "cancellation_fee_percent": float(self.cancellation_fee_percent),
        }


class Room(Base):
    """Bookable room inside a studio."""

    __tablename__ = "rooms"

    id = Column(String(26), primary_key=True, default=new_ulid)
    studio_id = Column(String(26), ForeignKey("studios.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, server_default=func.now())

    studio = relationship("Studio", back_populates="rooms")

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="check_room_capacity_positive"),
        Index("idx_rooms_studio", "studio_id"),
    )

    def __repr__(self) -> str:
        return f"<Room {self.id}: {self.name} (studio={self.studio_id})>"


class StudioService(Base):
    """Optional priced add-on (mixing, mastering...) offered by a studio."""

    __tablename__ = "studio_services"

    id = Column(String(26), primary_key=True, default=new_ulid)
    studio_id = Column(String(26), ForeignKey("studios.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    # Informational only, pricing never scales with it
    duration_minutes = Column(Integer, nullable=True)
    category = Column(String(20), nullable=False, default=ServiceCategory.OTHER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, server_default=func.now())

    studio = relationship("Studio", back_populates="services")

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_service_price_non_negative"),
        CheckConstraint(
            "category IN ('RECORDING', 'MIXING', 'MASTERING', 'PRODUCTION', 'OTHER')",
            name="ck_studio_services_category",
        ),
        Index("idx_studio_services_studio", "studio_id"),
    )

    def __repr__(self) -> str:
        return f"<StudioService {self.id}: {self.name} ${self.price}>"
