# backend/studio_booking/services/conflict_checker.py
"""
Conflict Checker Service for the studio booking backend.

Handles booking conflict detection for both slot queries and booking
creation. Both paths go through ``booking_conflicts_with`` so the buffered
overlap rule is defined exactly once.

Overlap rule:
    Each existing reservation is widened by the studio buffer on both ends.
    A candidate conflicts when its start or end falls inside the widened
    interval, or when it fully contains it. Touching the widened interval's
    edge is not a conflict, so a session may start exactly when the buffer
    after the previous one ends.
"""

from datetime import datetime, timedelta
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.timezone_utils import ensure_utc
from ..models.booking import Booking
from ..models.studio import Studio
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def buffered_interval(
    start: datetime, end: datetime, buffer_minutes: int
) -> Tuple[datetime, datetime]:
    """Widen [start, end] by ``buffer_minutes`` on both sides."""
    buffer = timedelta(minutes=buffer_minutes)
    return ensure_utc(start) - buffer, ensure_utc(end) + buffer


def booking_conflicts_with(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_start: datetime,
    existing_end: datetime,
    buffer_minutes: int,
) -> bool:
    """
    Return True if the candidate collides with the buffered existing interval.

    Args:
        candidate_start / candidate_end: Requested interval
        existing_start / existing_end: Reservation already holding the time
        buffer_minutes: Turnover time required around the existing reservation
    """
    dilated_start, dilated_end = buffered_interval(existing_start, existing_end, buffer_minutes)
    cand_start = ensure_utc(candidate_start)
    cand_end = ensure_utc(candidate_end)

    start_inside = dilated_start <= cand_start < dilated_end
    end_inside = dilated_start < cand_end <= dilated_end
    contains = cand_start <= dilated_start and cand_end >= dilated_end
    return start_inside or end_inside or contains


def find_conflicting(
    candidate_start: datetime,
    candidate_end: datetime,
    bookings: Iterable[Booking],
    buffer_minutes: int,
) -> List[Booking]:
    """Filter ``bookings`` down to those the candidate collides with."""
    return [
        booking
        for booking in bookings
        if booking_conflicts_with(
            candidate_start, candidate_end, booking.start_time, booking.end_time, buffer_minutes
        )
    ]


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts.

    Centralizes conflict detection so that availability queries and
    booking creation apply the same buffered rule.
    """

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    def get_candidate_bookings(
        self,
        studio: Studio,
        window_start: datetime,
        window_end: datetime,
        room_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Active bookings that could collide with anything inside the window.

        The window is widened by the studio buffer before querying.
        """
        buffer_minutes = studio.booking_buffer_minutes or 0
        query_start, query_end = buffered_interval(window_start, window_end, buffer_minutes)
        return self.repository.get_active_bookings_in_window(
            studio_id=studio.id,
            window_start=query_start,
            window_end=query_end,
            room_id=room_id,
            exclude_booking_id=exclude_booking_id,
        )

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        studio: Studio,
        start_time: datetime,
        end_time: datetime,
        room_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Return the existing bookings the requested interval collides with.

        Args:
            studio: Studio supplying the buffer policy
            start_time / end_time: Requested interval (aware datetimes)
            room_id: Room scope, None for the whole studio
            exclude_booking_id: Booking to ignore

        Returns:
            Conflicting bookings, empty if the interval is free
        """
        candidates = self.get_candidate_bookings(
            studio, start_time, end_time, room_id=room_id, exclude_booking_id=exclude_booking_id
        )
        conflicts = find_conflicting(
            start_time, end_time, candidates, studio.booking_buffer_minutes or 0
        )
        if conflicts:
            self.logger.debug(
                "booking_conflicts_found",
                extra={
                    "studio_id": studio.id,
                    "room_id": room_id,
                    "conflict_ids": [booking.id for booking in conflicts],
                },
            )
        return conflicts

