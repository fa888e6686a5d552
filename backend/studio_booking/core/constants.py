"""Application-wide constants for the studio booking backend."""

from __future__ import annotations

from decimal import Decimal

API_TITLE = "Studio Booking API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Availability, booking and payment backend for recording studios"

# Slot generation walks each open-hours window in fixed steps. This is a
# scheduling policy, not something derived from rule boundaries.
SLOT_STEP_MINUTES = 30

# Absolute floor for any booking, independent of studio settings
MIN_BOOKING_DURATION = 30  # minutes

# Text constraints
MAX_NOTES_LENGTH = 1000
MAX_REVIEW_COMMENT_LENGTH = 1000

# Ratings
MIN_RATING = 1
MAX_RATING = 5

# Payments
MIN_PAYMENT_AMOUNT = Decimal("0.50")
REFUND_REASON = "requested_by_customer"

# Query limits
DEFAULT_QUERY_LIMIT = 100
PUBLIC_REVIEWS_LIMIT = 10

# Defaults applied to newly created studios
DEFAULT_STUDIO_SETTINGS = {
    "hourly_rate": Decimal("100.00"),
    "booking_buffer_minutes": 15,
    "min_booking_minutes": 60,
    "max_booking_minutes": 480,
    "require_deposit": True,
    "deposit_type": "PERCENTAGE",
    "deposit_amount": Decimal("50.00"),
    "cancellation_hours": 24,
    "cancellation_fee_percent": Decimal("50.00"),
    "timezone": "America/New_York",
}
