# backend/studio_booking/core/exceptions.py
"""
Domain-specific exceptions for the studio booking backend.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException using the class status code."""
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when an operation is not allowed in the entity's current state."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with existing bookings."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is no longer available",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class BookingLockTimeoutException(ConflictException):
    """Raised when the studio booking lock cannot be acquired in time."""

    def __init__(self, studio_id: str, timeout_seconds: float):
        super().__init__(
            message="The studio is processing another booking. Please try again.",
            code="BOOKING_LOCK_TIMEOUT",
            details={"studio_id": studio_id, "timeout_seconds": timeout_seconds},
        )


class InvalidStatusTransitionException(BusinessRuleException):
    """Raised when a booking status change is not a legal transition."""

    def __init__(self, booking_id: str, current: str, requested: str):
        super().__init__(
            message=f"Cannot change booking status from {current} to {requested}",
            code="INVALID_STATUS_TRANSITION",
            details={"booking_id": booking_id, "current": current, "requested": requested},
        )


class ReviewNotAllowedException(BusinessRuleException):
    """Raised when reviewing a booking that has not been completed."""

    def __init__(self, booking_id: str, booking_status: str):
        super().__init__(
            message="Can only review completed bookings",
            code="REVIEW_NOT_ALLOWED",
            details={"booking_id": booking_id, "status": booking_status},
        )


class PaymentNotChargedException(BusinessRuleException):
    """Raised when refunding a payment that has no recorded charge."""

    def __init__(self, payment_id: str):
        super().__init__(
            message="Payment has not been charged and cannot be refunded",
            code="PAYMENT_NOT_CHARGED",
            details={"payment_id": payment_id},
        )


class InvalidPaymentStateException(BusinessRuleException):
    """Raised when a payment operation is not valid for the payment's status."""

    def __init__(self, payment_id: str, payment_status: str, operation: str):
        super().__init__(
            message=f"Cannot {operation} a payment in status {payment_status}",
            code="INVALID_PAYMENT_STATE",
            details={"payment_id": payment_id, "status": payment_status, "operation": operation},
        )


class PaymentGatewayException(ServiceException):
    """Raised when the payment gateway call fails or times out."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="PAYMENT_GATEWAY_ERROR", details=details or {})


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
