# backend/studio_booking/repositories/review_repository.py
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.constants import PUBLIC_REVIEWS_LIMIT
from ..core.exceptions import RepositoryException
from ..models.review import Review
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Repository for booking reviews."""

    def __init__(self, db: Session):
        super().__init__(db, Review)

    def get_by_booking(self, booking_id: str) -> Optional[Review]:
        try:
            return cast(
                Optional[Review],
                self.db.query(Review).filter(Review.booking_id == booking_id).first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting review for booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to get review: {str(e)}")

    def create_once(self, **kwargs) -> Optional[Review]:
        """
        Insert a review, or return None when the booking already has one.

        A concurrent review of the same booking loses on the unique
        booking_id constraint; only the savepoint is rolled back.
        """
        try:
            with self.db.begin_nested():
                review = Review(**kwargs)
                self.db.add(review)
                self.db.flush()
            return review
        except IntegrityError:
            self.logger.info(
                "review_create_race_lost", extra={"booking_id": kwargs.get("booking_id")}
            )
            return None
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating review: {str(e)}")
            raise RepositoryException(f"Failed to create review: {str(e)}")

    def get_public_for_studio(self, studio_id: str, limit: int = PUBLIC_REVIEWS_LIMIT) -> List[Review]:
        """Public reviews of a studio, newest first."""
        try:
            return cast(
                List[Review],
                self.db.query(Review)
                .options(joinedload(Review.client))
                .filter(Review.studio_id == studio_id, Review.is_public.is_(True))
                .order_by(Review.created_at.desc())
                .limit(limit)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting reviews for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to get reviews: {str(e)}")
