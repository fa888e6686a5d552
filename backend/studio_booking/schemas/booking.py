"""Booking request/response DTOs."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH, MIN_BOOKING_DURATION
from ..models.booking import BookingStatus
from ._strict_base import StrictRequestModel
from .base import Money, StandardizedModel


class BookingCreate(StrictRequestModel):
    """
    Request to book a studio.

    ``start_time`` must carry a UTC offset; bare local times are rejected.
    """

    studio_id: str
    client_id: str
    room_id: Optional[str] = None
    start_time: datetime
    duration_minutes: int = Field(..., ge=MIN_BOOKING_DURATION)
    service_ids: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("start_time")
    @classmethod
    def _require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("start_time must include a timezone offset")
        return value


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus
    internal_notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class BookingCancelRequest(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class BookingServiceItemResponse(StandardizedModel):
    service_id: str
    name: Optional[str] = None
    price: Money


class BookingResponse(StandardizedModel):
    id: str
    studio_id: str
    client_id: str
    room_id: Optional[str] = None
    start_time: datetime
    end_time: datetime
    total_amount: Money
    deposit_amount: Money
    deposit_paid: bool
    final_paid: bool
    status: BookingStatus
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    service_items: List[BookingServiceItemResponse] = Field(default_factory=list)
