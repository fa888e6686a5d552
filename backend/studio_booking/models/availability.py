# backend/studio_booking/models/availability.py
"""
Availability models for the studio booking backend.

A studio publishes a weekly recurring pattern of open hours. Each rule is a
wall-clock window on one weekday, interpreted in the studio's timezone.
A weekday may carry several disjoint windows (split morning/evening hours).
Rules are replaced wholesale on update, never patched individually.

Classes:
    AvailabilityRule: One open-hours window on one weekday
"""

import logging

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .types import UTCDateTime, new_ulid

logger = logging.getLogger(__name__)


class AvailabilityRule(Base):
    """Weekly recurring open-hours window for a studio."""

    __tablename__ = "availability_rules"

    id = Column(String(26), primary_key=True, default=new_ulid)
    studio_id = Column(String(26), ForeignKey("studios.id", ondelete="CASCADE"), nullable=False)
    # 0 = Sunday .. 6 = Saturday
    day_of_week = Column(Integer, nullable=False)
    # Wall-clock "HH:MM" in the studio timezone
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, server_default=func.now())

    # Relationships
    studio = relationship("Studio", back_populates="availability_rules")

    # Constraints
    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week_range"),
        Index("idx_availability_rules_studio_day", "studio_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilityRule studio={self.studio_id} day={self.day_of_week} "
            f"{self.start_time}-{self.end_time} available={self.is_available}>"
        )
