# backend/studio_booking/services/booking_service.py
"""
Booking Service for the studio booking backend.

Handles the booking lifecycle:
- Creation, with the conflict re-check and insert executed atomically
  under the studio booking lock and a studio row lock
- Staff-driven status updates along the allowed transitions
- Cancellation with cancellation-fee annotation
- Booking queries for studios and clients

Payment-driven transitions (deposit settled -> CONFIRMED) are applied by
the PaymentService through the Booking model helpers.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.booking_lock import studio_booking_lock
from ..core.config import settings
from ..core.constants import MAX_NOTES_LENGTH
from ..core.exceptions import (
    BookingConflictException,
    BookingLockTimeoutException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, hours_between, utc_now
from ..models.booking import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus
from ..models.studio import Studio
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from .base import BaseService
from .conflict_checker import ConflictChecker
from .pricing_service import PricingService
from .slot_service import validate_booking_duration

logger = logging.getLogger(__name__)

GENERIC_CONFLICT_MESSAGE = "This time slot conflicts with an existing booking"
PAST_BOOKING_MESSAGE = "Cannot book a time slot in the past"
NO_REASON_PROVIDED = "No reason provided"


def _format_percent(value: Any) -> str:
    return f"{float(value):g}"


def build_cancellation_note(
    reason: Optional[str], fee_applies: bool, fee_percent: Any
) -> str:
    """Human-readable cancellation rationale stored in internal notes."""
    note = f"Cancelled: {reason or NO_REASON_PROVIDED}. "
    if fee_applies:
        return note + f"Cancellation fee applies ({_format_percent(fee_percent)}%)"
    return note + "No cancellation fee"


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Centralizes booking business logic and coordinates with other services.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        pricing_service: Optional[PricingService] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.studio_repository = RepositoryFactory.create_studio_repository(db)
        self.client_repository = RepositoryFactory.create_client_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.pricing_service = pricing_service or PricingService()

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        studio_id: str,
        client_id: str,
        start_time: datetime,
        duration_minutes: int,
        room_id: Optional[str] = None,
        service_ids: Optional[Sequence[str]] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Booking:
        """
        Create a booking if the requested interval is still free.

        Args:
            studio_id: Studio being booked
            client_id: Client of that studio
            start_time: Absolute start instant
            duration_minutes: Session length
            room_id: Optional room; None books the whole studio
            service_ids: Add-on services; ids outside the studio catalog are ignored
            notes: Client notes
            now: Current instant override

        Returns:
            Created booking, PENDING when a deposit is required, else CONFIRMED

        Raises:
            NotFoundException: Unknown studio, client or room
            ValidationException: Bad duration, past slot, oversized notes
            BookingConflictException: Interval collides with an active booking
            BookingLockTimeoutException: Studio lock not acquired in time
        """
        now = ensure_utc(now or utc_now())
        start = ensure_utc(start_time)
        end = start + timedelta(minutes=duration_minutes)

        self.log_operation(
            "create_booking",
            studio_id=studio_id,
            client_id=client_id,
            room_id=room_id,
            start_time=start.isoformat(),
            duration_minutes=duration_minutes,
        )

        # 1. Validate and load required data (no writes yet)
        studio = self._validate_booking_prerequisites(
            studio_id, client_id, room_id, duration_minutes, end, notes, now
        )

        # 2. Price from the studio catalog
        services = [
            service
            for service in self.studio_repository.get_services_by_ids(studio_id, service_ids or [])
            if service.is_active
        ]
        quote = self.pricing_service.quote(studio, duration_minutes, [s.price for s in services])

        booking_data: Dict[str, Any] = {
            "studio_id": studio_id,
            "client_id": client_id,
            "room_id": room_id,
            "start_time": start,
            "end_time": end,
            "total_amount": quote.total_amount,
            "deposit_amount": quote.deposit_amount,
            "status": quote.initial_status.value,
            "notes": notes,
        }
        service_items = [
            {"service_id": service.id, "price": service.price, "name": service.name}
            for service in services
        ]

        # 3. Re-check and insert atomically
        try:
            with studio_booking_lock(studio_id, settings.booking_lock_timeout_seconds):
                with self.transaction():
                    self.studio_repository.get_for_update(studio_id)
                    conflicts = self.conflict_checker.check_booking_conflicts(
                        studio, start, end, room_id=room_id
                    )
                    if conflicts:
                        raise BookingConflictException(
                            message=GENERIC_CONFLICT_MESSAGE,
                            details=self._build_conflict_details(
                                studio_id, room_id, start, end, conflicts
                            ),
                        )
                    booking = self.repository.create_with_service_items(booking_data, service_items)
        except BookingConflictException:
            prometheus_metrics.record_booking_created("conflict")
            raise
        except BookingLockTimeoutException:
            prometheus_metrics.record_booking_created("lock_timeout")
            raise

        prometheus_metrics.record_booking_created("created")
        self.logger.info(
            "booking_created",
            extra={
                "booking_id": booking.id,
                "studio_id": studio_id,
                "booking_status": booking.status,
                "total_amount": str(booking.total_amount),
            },
        )
        return self.repository.get_booking_with_details(booking.id) or booking

    def _validate_booking_prerequisites(
        self,
        studio_id: str,
        client_id: str,
        room_id: Optional[str],
        duration_minutes: int,
        end: datetime,
        notes: Optional[str],
        now: datetime,
    ) -> Studio:
        studio = self.studio_repository.get_by_id(studio_id, load_relationships=False)
        if not studio:
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})

        validate_booking_duration(studio, duration_minutes)

        if end <= now:
            raise ValidationException(PAST_BOOKING_MESSAGE, code="BOOKING_IN_PAST")

        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationException(
                f"Notes must be at most {MAX_NOTES_LENGTH} characters", code="NOTES_TOO_LONG"
            )

        client = self.client_repository.get_by_id(client_id, load_relationships=False)
        if not client or client.studio_id != studio_id:
            raise NotFoundException("Client not found", details={"client_id": client_id})

        if room_id is not None:
            room = self.studio_repository.get_room(room_id)
            if not room or room.studio_id != studio_id or not room.is_active:
                raise NotFoundException("Room not found", details={"room_id": room_id})

        return studio

    @staticmethod
    def _build_conflict_details(
        studio_id: str,
        room_id: Optional[str],
        start: datetime,
        end: datetime,
        conflicts: List[Booking],
    ) -> Dict[str, Any]:
        return {
            "studio_id": studio_id,
            "room_id": room_id,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
            "conflicting_booking_ids": [booking.id for booking in conflicts],
        }

    # Queries

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return booking

    def get_studio_bookings(
        self,
        studio_id: str,
        status: Optional[BookingStatus] = None,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
    ) -> List[Booking]:
        if not self.studio_repository.exists(id=studio_id):
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})
        return self.repository.get_studio_bookings(
            studio_id,
            status=status.value if status else None,
            start_from=ensure_utc(start_from) if start_from else None,
            start_to=ensure_utc(start_to) if start_to else None,
        )

    # Lifecycle

    @BaseService.measure_operation("update_booking_status")
    def update_status(
        self,
        booking_id: str,
        new_status: BookingStatus,
        internal_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Booking:
        """
        Staff-driven status change.

        Moving to CANCELLED goes through cancellation so the fee annotation
        and timestamp are recorded; ``internal_notes`` is used as the reason.

        Raises:
            NotFoundException: Unknown booking
            InvalidStatusTransitionException: Transition not allowed
        """
        new_status = BookingStatus(new_status)
        if new_status == BookingStatus.CANCELLED:
            return self.cancel_booking(booking_id, reason=internal_notes, now=now)

        booking = self.get_booking(booking_id)
        if not booking.can_transition_to(new_status):
            raise InvalidStatusTransitionException(booking.id, booking.status, new_status.value)

        previous = booking.status
        with self.transaction():
            booking.status = new_status.value
            if internal_notes is not None:
                booking.internal_notes = internal_notes

        self.log_operation(
            "update_booking_status",
            booking_id=booking.id,
            from_status=previous,
            to_status=new_status.value,
        )
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self, booking_id: str, reason: Optional[str] = None, now: Optional[datetime] = None
    ) -> Booking:
        """
        Cancel a non-terminal booking.

        A cancellation fee is annotated, not charged, when the booking starts
        within the studio's cancellation window.
        """
        now = ensure_utc(now or utc_now())
        booking = self.get_booking(booking_id)
        if booking.status not in {status.value for status in ACTIVE_BOOKING_STATUSES}:
            raise InvalidStatusTransitionException(
                booking.id, booking.status, BookingStatus.CANCELLED.value
            )

        studio = booking.studio
        fee_applies = self.cancellation_fee_applies(booking, studio, now)

        with self.transaction():
            booking.cancel(
                cancelled_at=now,
                internal_notes=build_cancellation_note(
                    reason, fee_applies, studio.cancellation_fee_percent
                ),
            )

        self.log_operation(
            "cancel_booking",
            booking_id=booking.id,
            studio_id=booking.studio_id,
            fee_applies=fee_applies,
        )
        return booking

    @staticmethod
    def cancellation_fee_applies(booking: Booking, studio: Studio, now: datetime) -> bool:
        hours_until_booking = hours_between(now, booking.start_time)
        return hours_until_booking < studio.cancellation_hours
