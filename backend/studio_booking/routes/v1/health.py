# backend/studio_booking/routes/v1/health.py
"""
Health check endpoints for monitoring and load balancer checks.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...api.dependencies.database import get_db
from ...core.config import settings
from ...core.constants import API_VERSION
from ...schemas.health import HealthResponse, ReadyResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Does not touch the database; use /health/ready for that.
    """
    return HealthResponse(
        status="healthy",
        service="studio-booking-api",
        version=API_VERSION,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@router.get("/health/ready", response_model=ReadyResponse)
def readiness_check(db: Session = Depends(get_db)) -> ReadyResponse:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Readiness check failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "message": "Database unavailable",
                "code": "DATABASE_UNAVAILABLE",
                "details": {},
            },
        )
    return ReadyResponse(status="ready", database="ok")
