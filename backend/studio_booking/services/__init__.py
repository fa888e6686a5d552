# backend/studio_booking/services/__init__.py
"""
Service layer for the studio booking backend.

Services own business rules and transaction boundaries; repositories own
queries.
"""

from .availability_service import AvailabilityService
from .base import BaseService
from .booking_service import BookingService
from .client_service import ClientService
from .conflict_checker import ConflictChecker
from .payment_service import PaymentService
from .pricing_service import PricingService
from .review_service import ReviewService
from .slot_service import SlotService
from .studio_service import StudioService

__all__ = [
    "AvailabilityService",
    "BaseService",
    "BookingService",
    "ClientService",
    "ConflictChecker",
    "PaymentService",
    "PricingService",
    "ReviewService",
    "SlotService",
    "StudioService",
]
