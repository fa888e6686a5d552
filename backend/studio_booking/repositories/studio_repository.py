# backend/studio_booking/repositories/studio_repository.py
"""
Studio Repository for the studio booking backend.

Handles studios together with the rooms and service catalog they own,
plus the aggregate queries behind the studio statistics view.
"""

from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Sequence, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..models.payment import Payment, PaymentStatus
from ..models.review import Review
from ..models.studio import Room, Studio, StudioService
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class StudioRepository(BaseRepository[Studio]):
    """Repository for studios, rooms and studio services."""

    def __init__(self, db: Session):
        super().__init__(db, Studio)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            selectinload(Studio.rooms),
            selectinload(Studio.services),
            selectinload(Studio.availability_rules),
        )

    # Rooms

    def create_room(self, studio_id: str, **kwargs: Any) -> Room:
        try:
            room = Room(studio_id=studio_id, **kwargs)
            self.db.add(room)
            self.db.flush()
            return room
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating room for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to create room: {str(e)}")

    def get_room(self, room_id: str) -> Optional[Room]:
        try:
            return cast(Optional[Room], self.db.query(Room).filter(Room.id == room_id).first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting room {room_id}: {str(e)}")
            raise RepositoryException(f"Failed to get room: {str(e)}")

    def list_rooms(self, studio_id: str) -> List[Room]:
        try:
            return cast(
                List[Room],
                self.db.query(Room).filter(Room.studio_id == studio_id).order_by(Room.name).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing rooms for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to list rooms: {str(e)}")

    # Service catalog

    def create_service(self, studio_id: str, **kwargs: Any) -> StudioService:
        try:
            service = StudioService(studio_id=studio_id, **kwargs)
            self.db.add(service)
            self.db.flush()
            return service
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating service for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to create service: {str(e)}")

    def list_services(self, studio_id: str, active_only: bool = False) -> List[StudioService]:
        try:
            query = self.db.query(StudioService).filter(StudioService.studio_id == studio_id)
            if active_only:
                query = query.filter(StudioService.is_active.is_(True))
            return cast(List[StudioService], query.order_by(StudioService.name).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing services for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to list services: {str(e)}")

    def get_services_by_ids(self, studio_id: str, service_ids: Sequence[str]) -> List[StudioService]:
        """
        Return the studio's services matching ``service_ids``.

        Ids belonging to other studios or not existing at all are simply absent
        from the result.
        """
        if not service_ids:
            return []
        try:
            return cast(
                List[StudioService],
                self.db.query(StudioService)
                .filter(
                    StudioService.studio_id == studio_id,
                    StudioService.id.in_(list(service_ids)),
                )
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting services for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to get services: {str(e)}")

    # Statistics

    def get_stats(self, studio_id: str, now: datetime) -> Dict[str, Any]:
        """
        Aggregate booking, revenue and rating figures for a studio.

        Revenue counts SUCCEEDED payments only.
        """
        try:
            total_bookings = (
                self.db.query(func.count(Booking.id)).filter(Booking.studio_id == studio_id).scalar()
            )
            revenue = (
                self.db.query(func.coalesce(func.sum(Payment.amount), 0))
                .join(Booking, Payment.booking_id == Booking.id)
                .filter(
                    Booking.studio_id == studio_id,
                    Payment.status == PaymentStatus.SUCCEEDED.value,
                )
                .scalar()
            )
            average_rating = (
                self.db.query(func.avg(Review.rating)).filter(Review.studio_id == studio_id).scalar()
            )
            upcoming = (
                self.db.query(func.count(Booking.id))
                .filter(
                    Booking.studio_id == studio_id,
                    Booking.start_time >= now,
                    Booking.status.in_(
                        [BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value]
                    ),
                )
                .scalar()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error computing stats for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to compute studio stats: {str(e)}")

        return {
            "total_bookings": int(total_bookings or 0),
            "total_revenue": Decimal(str(revenue or 0)).quantize(Decimal("0.01")),
            "average_rating": float(average_rating) if average_rating is not None else None,
            "upcoming_bookings": int(upcoming or 0),
        }
