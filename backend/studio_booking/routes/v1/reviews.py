# backend/studio_booking/routes/v1/reviews.py
"""
Review routes - API v1

Endpoints:
    POST /reviews                     → Review a completed booking
    GET /studios/{studio_id}/reviews  → Public reviews, newest first
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.services import get_review_service
from ...core.exceptions import DomainException
from ...schemas.review import ReviewCreate, ReviewResponse
from ...services.review_service import ReviewService
from ._common import StudioId, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews-v1"])


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = review_service.create_review(
            payload.booking_id,
            payload.rating,
            comment=payload.comment,
            is_public=payload.is_public,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return ReviewResponse.model_validate(review)


@router.get("/studios/{studio_id}/reviews", response_model=List[ReviewResponse])
def list_studio_reviews(
    studio_id: StudioId,
    review_service: ReviewService = Depends(get_review_service),
) -> List[ReviewResponse]:
    try:
        reviews = review_service.get_studio_reviews(studio_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [ReviewResponse.model_validate(review) for review in reviews]
