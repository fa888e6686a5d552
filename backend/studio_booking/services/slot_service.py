# backend/studio_booking/services/slot_service.py
"""
Slot generation for the studio booking backend.

Turns a calendar date, a requested duration and the studio's weekly rules
into bookable time windows:

1. Resolve the weekday (0 = Sunday) of the date.
2. For each available rule of that weekday, step a candidate start through
   the rule window every SLOT_STEP_MINUTES, in absolute time.
3. Keep a candidate if it ends within the rule, ends after "now", and does
   not collide with an active buffered reservation.

Results are advisory; booking creation re-checks under the studio lock.
Candidates from overlapping rules are not de-duplicated.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import MIN_BOOKING_DURATION, SLOT_STEP_MINUTES
from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import (
    ensure_utc,
    get_studio_timezone,
    js_day_of_week,
    local_day_bounds,
    localize_wall_clock,
    parse_wall_clock,
    utc_now,
)
from ..models.availability import AvailabilityRule
from ..models.booking import Booking
from ..models.studio import Studio
from ..repositories import RepositoryFactory
from .base import BaseService
from .conflict_checker import ConflictChecker, find_conflicting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    end: datetime


def validate_booking_duration(studio: Studio, duration_minutes: int) -> None:
    """
    Enforce the absolute floor and the studio's min/max duration.

    Raises:
        ValidationException: If the duration is out of range
    """
    details = {
        "duration_minutes": duration_minutes,
        "min_booking_minutes": studio.min_booking_minutes,
        "max_booking_minutes": studio.max_booking_minutes,
    }
    if duration_minutes < MIN_BOOKING_DURATION:
        raise ValidationException(
            f"Booking duration must be at least {MIN_BOOKING_DURATION} minutes",
            code="DURATION_TOO_SHORT",
            details=details,
        )
    if studio.min_booking_minutes and duration_minutes < studio.min_booking_minutes:
        raise ValidationException(
            f"Minimum booking duration is {studio.min_booking_minutes} minutes",
            code="DURATION_TOO_SHORT",
            details=details,
        )
    if studio.max_booking_minutes and duration_minutes > studio.max_booking_minutes:
        raise ValidationException(
            f"Maximum booking duration is {studio.max_booking_minutes} minutes",
            code="DURATION_TOO_LONG",
            details=details,
        )


def generate_slots(
    rules: Iterable[AvailabilityRule],
    target_date: date,
    duration_minutes: int,
    studio: Studio,
    existing_bookings: Iterable[Booking],
    now: datetime,
) -> List[TimeSlot]:
    """
    Build the ordered list of free slots for one date.

    Args:
        rules: Available rules for the date's weekday
        target_date: Calendar date in the studio's timezone
        duration_minutes: Requested session length
        studio: Studio supplying timezone and buffer
        existing_bookings: Active reservations near the date
        now: Current instant; slots ending at or before it are dropped
    """
    tz = get_studio_timezone(studio)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=SLOT_STEP_MINUTES)
    buffer_minutes = studio.booking_buffer_minutes or 0
    bookings = list(existing_bookings)
    now = ensure_utc(now)

    slots: List[TimeSlot] = []
    for rule in rules:
        if not rule.is_available:
            continue
        rule_start = localize_wall_clock(target_date, parse_wall_clock(rule.start_time), tz)
        rule_end = localize_wall_clock(target_date, parse_wall_clock(rule.end_time), tz)

        cursor = rule_start
        while cursor < rule_end:
            slot_end = cursor + duration
            if slot_end > rule_end:
                break
            if slot_end > now and not find_conflicting(cursor, slot_end, bookings, buffer_minutes):
                slots.append(TimeSlot(start=cursor, end=slot_end))
            cursor += step

    slots.sort(key=lambda slot: slot.start)
    return slots


class SlotService(BaseService):
    """Answers "what can be booked" for a studio on a given date."""

    def __init__(self, db: Session, conflict_checker: Optional[ConflictChecker] = None):
        super().__init__(db)
        self.studio_repository = RepositoryFactory.create_studio_repository(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self,
        studio_id: str,
        target_date: date,
        duration_minutes: int,
        room_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        Free slots of ``duration_minutes`` on ``target_date``.

        An empty list is a normal answer (closed day or fully booked).

        Raises:
            NotFoundException: Unknown studio or room
            ValidationException: Duration out of range
        """
        studio = self.studio_repository.get_by_id(studio_id, load_relationships=False)
        if not studio:
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})
        if room_id is not None:
            room = self.studio_repository.get_room(room_id)
            if not room or room.studio_id != studio_id:
                raise NotFoundException("Room not found", details={"room_id": room_id})

        validate_booking_duration(studio, duration_minutes)

        rules = self.availability_repository.get_rules_for_day(studio_id, js_day_of_week(target_date))
        if not rules:
            return []

        day_start, day_end = local_day_bounds(target_date, get_studio_timezone(studio))
        bookings = self.conflict_checker.get_candidate_bookings(
            studio, day_start, day_end, room_id=room_id
        )

        slots = generate_slots(
            rules,
            target_date,
            duration_minutes,
            studio,
            bookings,
            now or utc_now(),
        )
        self.logger.debug(
            "slots_generated",
            extra={
                "studio_id": studio_id,
                "date": target_date.isoformat(),
                "duration_minutes": duration_minutes,
                "slot_count": len(slots),
            },
        )
        return slots
