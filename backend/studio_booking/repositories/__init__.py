# backend/studio_booking/repositories/__init__.py
"""
Repository Pattern Implementation for the studio booking backend.

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from studio_booking.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_conflict_checker_repository(db)
    bookings = repository.get_active_bookings_in_window(studio_id, start, end)
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .client_repository import ClientRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .payment_repository import PaymentRepository
from .review_repository import ReviewRepository
from .studio_repository import StudioRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "ClientRepository",
    "ConflictCheckerRepository",
    "PaymentRepository",
    "RepositoryFactory",
    "ReviewRepository",
    "StudioRepository",
]
