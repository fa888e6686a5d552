# backend/studio_booking/repositories/availability_repository.py
"""
Availability Repository for the studio booking backend.

Weekly rules are read per weekday and replaced wholesale. The replace is a
delete followed by inserts in the caller's transaction, so a failure rolls
back to the previous rule set.
"""

import logging
from typing import Any, Dict, List, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilityRule
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[AvailabilityRule]):
    """Repository for studio availability rules."""

    def __init__(self, db: Session):
        super().__init__(db, AvailabilityRule)
        self.logger = logging.getLogger(__name__)

    def get_rules_for_day(self, studio_id: str, day_of_week: int) -> List[AvailabilityRule]:
        """
        Available rules for one weekday, ordered by start time.

        ``HH:MM`` strings are zero-padded so lexical order is chronological.
        """
        try:
            return cast(
                List[AvailabilityRule],
                self.db.query(AvailabilityRule)
                .filter(
                    AvailabilityRule.studio_id == studio_id,
                    AvailabilityRule.day_of_week == day_of_week,
                    AvailabilityRule.is_available.is_(True),
                )
                .order_by(AvailabilityRule.start_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting rules for studio {studio_id} day {day_of_week}: {str(e)}")
            raise RepositoryException(f"Failed to get availability rules: {str(e)}")

    def get_all_for_studio(self, studio_id: str) -> List[AvailabilityRule]:
        try:
            return cast(
                List[AvailabilityRule],
                self.db.query(AvailabilityRule)
                .filter(AvailabilityRule.studio_id == studio_id)
                .order_by(AvailabilityRule.day_of_week, AvailabilityRule.start_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting rules for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to get availability rules: {str(e)}")

    def delete_all_for_studio(self, studio_id: str) -> int:
        try:
            deleted = (
                self.db.query(AvailabilityRule)
                .filter(AvailabilityRule.studio_id == studio_id)
                .delete(synchronize_session="fetch")
            )
            return int(deleted)
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting rules for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete availability rules: {str(e)}")

    def bulk_create_rules(self, studio_id: str, rules: List[Dict[str, Any]]) -> List[AvailabilityRule]:
        try:
            created = [AvailabilityRule(studio_id=studio_id, **data) for data in rules]
            self.db.add_all(created)
            self.db.flush()
            return created
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating rules for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to create availability rules: {str(e)}")
