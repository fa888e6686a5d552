"""Helpers shared by the v1 routers."""

from typing import Annotated, NoReturn

from fastapi import HTTPException, Path, status

from ...core.exceptions import DomainException

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"

StudioId = Annotated[str, Path(description="Studio ULID", pattern=ULID_PATH_PATTERN)]
BookingId = Annotated[str, Path(description="Booking ULID", pattern=ULID_PATH_PATTERN)]
PaymentId = Annotated[str, Path(description="Payment ULID", pattern=ULID_PATH_PATTERN)]
ClientId = Annotated[str, Path(description="Client ULID", pattern=ULID_PATH_PATTERN)]


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
