# backend/studio_booking/models/review.py
"""Review model: one rating per completed booking."""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .types import UTCDateTime, new_ulid


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=new_ulid)
    booking_id = Column(String(26), ForeignKey("bookings.id"), nullable=False, unique=True)
    # Denormalized for studio listings
    studio_id = Column(String(26), ForeignKey("studios.id"), nullable=False)
    client_id = Column(String(26), ForeignKey("clients.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)

    booking = relationship("Booking", back_populates="review")
    client = relationship("Client")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
        Index("idx_reviews_studio_public", "studio_id", "is_public"),
    )

    def __repr__(self) -> str:
        return f"<Review {self.id}: booking={self.booking_id} rating={self.rating}>"
