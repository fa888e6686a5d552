# backend/studio_booking/errors.py
"""
Application-wide exception handlers.

Routes translate domain exceptions themselves; these handlers catch any
that escape, plus unexpected failures, and keep the
``{"detail": {"message", "code", "details"}}`` envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Domain error on %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
                extra={"error_code": exc.code},
            )
        return JSONResponse(
            {"detail": jsonable_encoder(exc.to_dict())},
            status_code=exc.status_code,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            extra={"error_type": type(exc).__name__},
        )
        return JSONResponse(
            {
                "detail": {
                    "message": "An unexpected error occurred",
                    "code": "INTERNAL_ERROR",
                    "details": {},
                }
            },
            status_code=500,
        )
