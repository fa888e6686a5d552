# backend/studio_booking/services/availability_service.py
"""
Availability Service for the studio booking backend.

Owns the studio's weekly open-hours rules. Updates replace the entire rule
set in one transaction: all rules are validated before anything is deleted,
and a failure during insert rolls back to the previous set.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import format_wall_clock, parse_wall_clock
from ..models.availability import AvailabilityRule
from ..repositories import RepositoryFactory
from ..repositories.availability_repository import AvailabilityRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    """Service for weekly studio availability rules."""

    def __init__(self, db: Session, repository: Optional[AvailabilityRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_availability_repository(db)
        self.studio_repository = RepositoryFactory.create_studio_repository(db)

    def _require_studio(self, studio_id: str) -> None:
        if not self.studio_repository.exists(id=studio_id):
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})

    @staticmethod
    def normalize_rules(rules: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Validate and normalize raw rule dicts.

        Times are re-formatted as zero-padded ``HH:MM`` so they sort
        chronologically as strings.

        Raises:
            ValidationException: On any malformed rule (nothing is persisted)
        """
        normalized: List[Dict[str, Any]] = []
        for index, rule in enumerate(rules):
            day_of_week = rule.get("day_of_week")
            if not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
                raise ValidationException(
                    "day_of_week must be between 0 (Sunday) and 6 (Saturday)",
                    code="INVALID_DAY_OF_WEEK",
                    details={"index": index, "day_of_week": day_of_week},
                )
            try:
                start = parse_wall_clock(rule.get("start_time", ""))
                end = parse_wall_clock(rule.get("end_time", ""))
            except ValueError as exc:
                raise ValidationException(
                    str(exc), code="INVALID_TIME_FORMAT", details={"index": index}
                ) from exc
            if start >= end:
                raise ValidationException(
                    "start_time must be before end_time",
                    code="INVALID_TIME_RANGE",
                    details={
                        "index": index,
                        "start_time": rule.get("start_time"),
                        "end_time": rule.get("end_time"),
                    },
                )
            normalized.append(
                {
                    "day_of_week": day_of_week,
                    "start_time": format_wall_clock(start),
                    "end_time": format_wall_clock(end),
                    "is_available": bool(rule.get("is_available", True)),
                }
            )
        return normalized

    def get_rules_for_day(self, studio_id: str, day_of_week: int) -> List[AvailabilityRule]:
        """Available rules of one weekday, ordered by start time."""
        return self.repository.get_rules_for_day(studio_id, day_of_week)

    def get_studio_availability(self, studio_id: str) -> List[AvailabilityRule]:
        self._require_studio(studio_id)
        return self.repository.get_all_for_studio(studio_id)

    @BaseService.measure_operation("replace_availability")
    def replace_all(self, studio_id: str, rules: Sequence[Dict[str, Any]]) -> List[AvailabilityRule]:
        """
        Replace the studio's weekly rules with ``rules``.

        Args:
            studio_id: Studio to update
            rules: Dicts with day_of_week, start_time, end_time, is_available

        Returns:
            The new rule set, ordered by weekday and start time
        """
        self._require_studio(studio_id)
        normalized = self.normalize_rules(rules)

        with self.transaction():
            deleted = self.repository.delete_all_for_studio(studio_id)
            self.repository.bulk_create_rules(studio_id, normalized)

        self.log_operation(
            "replace_availability",
            studio_id=studio_id,
            deleted_count=deleted,
            created_count=len(normalized),
        )
        return self.repository.get_all_for_studio(studio_id)
