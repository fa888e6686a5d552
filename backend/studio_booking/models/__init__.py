# backend/studio_booking/models/__init__.py
"""
SQLAlchemy models for the studio booking backend.

Importing this package registers every table on ``Base.metadata``.
"""

from .availability import AvailabilityRule
from .booking import (
    ACTIVE_BOOKING_STATUSES,
    ALLOWED_TRANSITIONS,
    TERMINAL_BOOKING_STATUSES,
    Booking,
    BookingServiceItem,
    BookingStatus,
)
from .client import Client
from .payment import Payment, PaymentStatus, PaymentType
from .review import Review
from .studio import DepositType, Room, ServiceCategory, Studio, StudioService

__all__ = [
    "ACTIVE_BOOKING_STATUSES",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_BOOKING_STATUSES",
    "AvailabilityRule",
    "Booking",
    "BookingServiceItem",
    "BookingStatus",
    "Client",
    "DepositType",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "Review",
    "Room",
    "ServiceCategory",
    "Studio",
    "StudioService",
]
