"""Review DTOs."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..core.constants import MAX_REVIEW_COMMENT_LENGTH
from ._strict_base import StrictRequestModel
from .base import StandardizedModel


class ReviewCreate(StrictRequestModel):
    booking_id: str
    # Range is enforced by the service so the error carries the domain code
    rating: int
    comment: Optional[str] = Field(None, max_length=MAX_REVIEW_COMMENT_LENGTH)
    is_public: bool = True


class ReviewResponse(StandardizedModel):
    id: str
    booking_id: str
    studio_id: str
    rating: int
    comment: Optional[str] = None
    is_public: bool
    created_at: Optional[datetime] = None
