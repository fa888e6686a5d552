# backend/studio_booking/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from functools import lru_cache
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...integrations import FakePaymentGateway, PaymentGateway, StripePaymentGateway
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.client_service import ClientService
from ...services.payment_service import PaymentService
from ...services.review_service import ReviewService
from ...services.slot_service import SlotService
from ...services.studio_service import StudioService
from .database import get_db

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway:
    """
    Process-wide payment gateway.

    Outside production a missing Stripe key falls back to the in-memory
    gateway with a warning; in production it is a configuration error.
    """
    if settings.payment_gateway == "fake":
        logger.info("Using FakePaymentGateway", extra={"environment": settings.environment})
        return FakePaymentGateway()

    try:
        return StripePaymentGateway(
            api_key=settings.stripe_secret_key,
            timeout_seconds=settings.stripe_timeout_seconds,
        )
    except ValueError as exc:  # Missing API key
        if settings.is_production:
            raise
        logger.warning(
            "Falling back to FakePaymentGateway due to configuration error",
            extra={"error": str(exc), "environment": settings.environment},
        )
        return FakePaymentGateway()


def get_studio_service(db: Session = Depends(get_db)) -> StudioService:
    return StudioService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_slot_service(db: Session = Depends(get_db)) -> SlotService:
    return SlotService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Get booking service instance for dependency injection."""
    return BookingService(db)


def get_payment_service(
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService(db, gateway=gateway)


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    return ClientService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)
