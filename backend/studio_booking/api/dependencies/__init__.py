# backend/studio_booking/api/dependencies/__init__.py
"""
Centralized dependency injection for FastAPI routes.
"""

from .database import get_db
from .services import (
    get_availability_service,
    get_booking_service,
    get_client_service,
    get_payment_gateway,
    get_payment_service,
    get_review_service,
    get_slot_service,
    get_studio_service,
)

__all__ = [
    "get_availability_service",
    "get_booking_service",
    "get_client_service",
    "get_db",
    "get_payment_gateway",
    "get_payment_service",
    "get_review_service",
    "get_slot_service",
    "get_studio_service",
]
