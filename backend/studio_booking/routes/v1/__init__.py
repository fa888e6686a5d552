# backend/studio_booking/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import bookings, clients, health, payments, prometheus, reviews, studios

__all__ = [
    "bookings",
    "clients",
    "health",
    "payments",
    "prometheus",
    "reviews",
    "studios",
]
