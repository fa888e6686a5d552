# backend/studio_booking/routes/v1/bookings.py
"""
Booking routes - API v1

Endpoints:
    POST /bookings                        → Book a studio (atomic conflict re-check)
    GET /bookings/{booking_id}            → Booking with service items
    GET /studios/{studio_id}/bookings     → Studio calendar, filterable
    PATCH /bookings/{booking_id}/status   → Staff status change
    POST /bookings/{booking_id}/cancel    → Cancel with fee annotation
"""

from datetime import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.services import get_booking_service
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...schemas.booking import (
    BookingCancelRequest,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
)
from ...services.booking_service import BookingService
from ._common import BookingId, StudioId, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Create a booking.

    Returns 409 when the interval was taken since the slots were listed,
    or when the studio is busy with another booking request.
    """
    try:
        booking = booking_service.create_booking(
            studio_id=payload.studio_id,
            client_id=payload.client_id,
            start_time=payload.start_time,
            duration_minutes=payload.duration_minutes,
            room_id=payload.room_id,
            service_ids=payload.service_ids,
            notes=payload.notes,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: BookingId,
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = booking_service.get_booking(booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.get("/studios/{studio_id}/bookings", response_model=List[BookingResponse])
def list_studio_bookings(
    studio_id: StudioId,
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    start_from: Optional[datetime] = Query(None),
    start_to: Optional[datetime] = Query(None),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    try:
        bookings = booking_service.get_studio_bookings(
            studio_id, status=status_filter, start_from=start_from, start_to=start_to
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return [BookingResponse.model_validate(booking) for booking in bookings]


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    payload: BookingStatusUpdate,
    booking_id: BookingId,
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = booking_service.update_status(
            booking_id, payload.status, internal_notes=payload.internal_notes
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: BookingId,
    payload: Optional[BookingCancelRequest] = None,
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = booking_service.cancel_booking(
            booking_id, reason=payload.reason if payload else None
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)
