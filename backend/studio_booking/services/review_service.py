# backend/studio_booking/services/review_service.py
"""
Review Service for the studio booking backend.

Reviews are allowed only once a booking is COMPLETED, one per booking.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import MAX_RATING, MAX_REVIEW_COMMENT_LENGTH, MIN_RATING
from ..core.exceptions import (
    ConflictException,
    NotFoundException,
    ReviewNotAllowedException,
    ValidationException,
)
from ..models.booking import BookingStatus
from ..models.review import Review
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_review_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.studio_repository = RepositoryFactory.create_studio_repository(db)

    @BaseService.measure_operation("create_review")
    def create_review(
        self,
        booking_id: str,
        rating: int,
        comment: Optional[str] = None,
        is_public: bool = True,
    ) -> Review:
        """
        Submit a review for a completed booking.

        Raises:
            ValidationException: Rating outside 1..5 or comment too long
            NotFoundException: Unknown booking
            ReviewNotAllowedException: Booking not COMPLETED
            ConflictException: Booking already reviewed
        """
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationException(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                code="INVALID_RATING",
                details={"rating": rating},
            )
        if comment is not None and len(comment) > MAX_REVIEW_COMMENT_LENGTH:
            raise ValidationException(
                f"Comment must be at most {MAX_REVIEW_COMMENT_LENGTH} characters",
                code="COMMENT_TOO_LONG",
            )

        booking = self.booking_repository.get_by_id(booking_id, load_relationships=False)
        if not booking:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        if booking.status != BookingStatus.COMPLETED.value:
            raise ReviewNotAllowedException(booking.id, booking.status)
        if self.repository.get_by_booking(booking_id):
            raise self._already_reviewed(booking_id)

        with self.transaction():
            review = self.repository.create_once(
                booking_id=booking.id,
                studio_id=booking.studio_id,
                client_id=booking.client_id,
                rating=rating,
                comment=comment,
                is_public=is_public,
            )
            if review is None:
                raise self._already_reviewed(booking_id)

        self.log_operation("create_review", review_id=review.id, booking_id=booking.id, rating=rating)
        return review

    @staticmethod
    def _already_reviewed(booking_id: str) -> ConflictException:
        return ConflictException(
            "This booking has already been reviewed",
            code="REVIEW_EXISTS",
            details={"booking_id": booking_id},
        )

    def get_studio_reviews(self, studio_id: str) -> List[Review]:
        if not self.studio_repository.exists(id=studio_id):
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})
        return self.repository.get_public_for_studio(studio_id)
