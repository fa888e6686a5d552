# backend/studio_booking/repositories/booking_repository.py
"""
Booking Repository for the studio booking backend.

Implements booking data access:
- Creating bookings with their service line items
- Studio and client booking listings
- Detail loading for API responses
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Optional, Sequence, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingServiceItem
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.client),
            joinedload(Booking.room),
            selectinload(Booking.service_items),
        )

    def get_booking_with_details(self, booking_id: str) -> Optional[Booking]:
        return self.get_by_id(booking_id, load_relationships=True)

    def create_with_service_items(
        self, booking_data: Dict[str, Any], service_items: Sequence[Dict[str, Any]]
    ) -> Booking:
        """
        Insert a booking and its service snapshots in the current transaction.

        Does NOT commit.
        """
        try:
            booking = Booking(**booking_data)
            booking.service_items = [BookingServiceItem(**item) for item in service_items]
            self.db.add(booking)
            self.db.flush()
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating booking: {str(e)}")
            raise RepositoryException(f"Failed to create booking: {str(e)}")

    def get_studio_bookings(
        self,
        studio_id: str,
        status: Optional[str] = None,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> List[Booking]:
        """
        Bookings of a studio ordered by start time.

        Args:
            studio_id: Studio to list
            status: Optional status filter
            start_from: Only bookings starting at or after this instant
            start_to: Only bookings starting before this instant
            limit: Maximum rows
        """
        try:
            query = self._apply_eager_loading(self.db.query(Booking)).filter(
                Booking.studio_id == studio_id
            )
            if status:
                query = query.filter(Booking.status == status)
            if start_from is not None:
                query = query.filter(Booking.start_time >= start_from)
            if start_to is not None:
                query = query.filter(Booking.start_time < start_to)
            return cast(List[Booking], query.order_by(Booking.start_time).limit(limit).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to get studio bookings: {str(e)}")

    def get_client_bookings(self, client_id: str, limit: int = DEFAULT_QUERY_LIMIT) -> List[Booking]:
        """A client's bookings, most recent start first."""
        try:
            return cast(
                List[Booking],
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.client_id == client_id)
                .order_by(Booking.start_time.desc())
                .limit(limit)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for client {client_id}: {str(e)}")
            raise RepositoryException(f"Failed to get client bookings: {str(e)}")
