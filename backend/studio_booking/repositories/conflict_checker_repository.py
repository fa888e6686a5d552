# backend/studio_booking/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the studio booking backend.

Fetches the reservations that could collide with a candidate interval.
The overlap decision itself lives in the ConflictChecker service; this
repository only narrows the candidate set with an index-friendly prefilter.

Room scope:
- A room booking competes with bookings of the same room and with
  room-less bookings (which occupy the whole studio).
- A room-less booking competes with every booking of the studio.
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import ACTIVE_BOOKING_STATUSES, Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_BOOKING_STATUSES]


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_active_bookings_in_window(
        self,
        studio_id: str,
        window_start: datetime,
        window_end: datetime,
        room_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Get PENDING/CONFIRMED/IN_PROGRESS bookings touching [window_start, window_end].

        Bounds are inclusive so that bookings ending exactly at the window
        start are still handed to the overlap predicate.

        Args:
            studio_id: Studio to check
            window_start: Earliest instant of interest (already buffer-widened)
            window_end: Latest instant of interest (already buffer-widened)
            room_id: Room scope, None for the whole studio
            exclude_booking_id: Optional booking to leave out

        Returns:
            Bookings ordered by start time
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.studio_id == studio_id,
                Booking.status.in_(_ACTIVE_STATUS_VALUES),
                Booking.start_time <= window_end,
                Booking.end_time >= window_start,
            )

            if room_id is not None:
                query = query.filter(or_(Booking.room_id == room_id, Booking.room_id.is_(None)))

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return cast(List[Booking], query.order_by(Booking.start_time).all())

        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")
