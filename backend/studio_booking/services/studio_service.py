# backend/studio_booking/services/studio_service.py
"""
Studio Service for the studio booking backend.

Studio settings, rooms, the add-on service catalog and studio statistics.
"""

from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

import pytz
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_STUDIO_SETTINGS
from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.review import Review
from ..models.studio import DepositType, Room, Studio
from ..models.studio import StudioService as StudioServiceModel
from ..repositories import RepositoryFactory
from ..repositories.studio_repository import StudioRepository
from .base import BaseService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "name",
    "description",
    "address",
    "phone",
    "email",
    "timezone",
    "hourly_rate",
    "booking_buffer_minutes",
    "min_booking_minutes",
    "max_booking_minutes",
    "require_deposit",
    "deposit_type",
    "deposit_amount",
    "cancellation_hours",
    "cancellation_fee_percent",
}


class StudioService(BaseService):
    """Service for studio settings and catalog management."""

    def __init__(self, db: Session, repository: Optional[StudioRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_studio_repository(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)

    def get_studio(self, studio_id: str) -> Studio:
        """Studio with rooms, services and availability loaded."""
        studio = self.repository.get_by_id(studio_id, load_relationships=True)
        if not studio:
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})
        return studio

    def get_recent_public_reviews(self, studio_id: str) -> List[Review]:
        return self.review_repository.get_public_for_studio(studio_id)

    @staticmethod
    def validate_settings(values: Dict[str, Any]) -> None:
        """
        Check a full set of studio settings for consistency.

        Raises:
            ValidationException: On the first inconsistent value
        """
        if Decimal(str(values["hourly_rate"])) < 0:
            raise ValidationException("Hourly rate cannot be negative", code="INVALID_HOURLY_RATE")
        if values["booking_buffer_minutes"] < 0:
            raise ValidationException("Buffer cannot be negative", code="INVALID_BUFFER")
        if values["min_booking_minutes"] > values["max_booking_minutes"]:
            raise ValidationException(
                "Minimum booking duration cannot exceed the maximum",
                code="INVALID_DURATION_LIMITS",
                details={
                    "min_booking_minutes": values["min_booking_minutes"],
                    "max_booking_minutes": values["max_booking_minutes"],
                },
            )
        if values["deposit_type"] not in {t.value for t in DepositType}:
            raise ValidationException("Unknown deposit type", code="INVALID_DEPOSIT_TYPE")
        deposit_amount = Decimal(str(values["deposit_amount"]))
        if deposit_amount < 0 or (
            values["deposit_type"] == DepositType.PERCENTAGE.value and deposit_amount > 100
        ):
            raise ValidationException("Invalid deposit amount", code="INVALID_DEPOSIT_AMOUNT")
        if values["cancellation_hours"] < 0:
            raise ValidationException(
                "Cancellation window cannot be negative", code="INVALID_CANCELLATION_HOURS"
            )
        fee = Decimal(str(values["cancellation_fee_percent"]))
        if fee < 0 or fee > 100:
            raise ValidationException(
                "Cancellation fee must be between 0 and 100 percent",
                code="INVALID_CANCELLATION_FEE",
            )
        if values["timezone"] not in pytz.all_timezones_set:
            raise ValidationException(
                "Unknown timezone", code="INVALID_TIMEZONE", details={"timezone": values["timezone"]}
            )

    @BaseService.measure_operation("create_studio")
    def create_studio(self, data: Dict[str, Any]) -> Studio:
        """Create a studio; settings not supplied take the platform defaults."""
        values = {**DEFAULT_STUDIO_SETTINGS, **{k: v for k, v in data.items() if v is not None}}
        self.validate_settings(values)

        with self.transaction():
            studio = self.repository.create(**values)

        self.log_operation("create_studio", studio_id=studio.id)
        return self.get_studio(studio.id)

    @BaseService.measure_operation("update_studio")
    def update_studio(self, studio_id: str, updates: Dict[str, Any]) -> Studio:
        """
        Partially update studio settings.

        Existing bookings keep the amounts computed at their creation.
        """
        studio = self.get_studio(studio_id)
        changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None}
        if not changes:
            return studio

        merged = {field: getattr(studio, field) for field in UPDATABLE_FIELDS}
        merged.update(changes)
        self.validate_settings(merged)

        with self.transaction():
            for key, value in changes.items():
                setattr(studio, key, value)

        self.log_operation("update_studio", studio_id=studio_id, fields=sorted(changes))
        return studio

    def get_studio_stats(self, studio_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        self.get_studio(studio_id)
        return self.repository.get_stats(studio_id, ensure_utc(now or utc_now()))

    # Rooms

    def add_room(self, studio_id: str, data: Dict[str, Any]) -> Room:
        self.get_studio(studio_id)
        with self.transaction():
            room = self.repository.create_room(studio_id, **data)
        self.log_operation("add_room", studio_id=studio_id, room_id=room.id)
        return room

    def list_rooms(self, studio_id: str) -> List[Room]:
        self.get_studio(studio_id)
        return self.repository.list_rooms(studio_id)

    # Service catalog

    def add_service(self, studio_id: str, data: Dict[str, Any]) -> StudioServiceModel:
        self.get_studio(studio_id)
        if Decimal(str(data.get("price", 0))) < 0:
            raise ValidationException("Service price cannot be negative", code="INVALID_PRICE")
        with self.transaction():
            service = self.repository.create_service(studio_id, **data)
        self.log_operation("add_service", studio_id=studio_id, service_id=service.id)
        return service

    def list_services(self, studio_id: str, active_only: bool = False) -> List[StudioServiceModel]:
        self.get_studio(studio_id)
        return self.repository.list_services(studio_id, active_only=active_only)
