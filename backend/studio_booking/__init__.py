"""Studio booking backend: availability, slot search, bookings and payments for recording studios."""
