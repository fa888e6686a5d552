# backend/studio_booking/routes/v1/payments.py
"""
Payment routes - API v1

Endpoints:
    POST /payments/intents                → Start a deposit/final/full payment
    POST /payments/{payment_id}/confirm   → Re-verify with the gateway and settle
    POST /payments/{payment_id}/refund    → Full or partial refund
    GET /bookings/{booking_id}/payments   → Payment history, newest first
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.services import get_payment_service
from ...core.exceptions import DomainException
from ...schemas.payment import (
    PaymentConfirmRequest,
    PaymentConfirmResponse,
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentResponse,
    RefundRequest,
)
from ...services.payment_service import PaymentService
from ._common import BookingId, PaymentId, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments-v1"])


@router.post(
    "/payments/intents",
    response_model=PaymentIntentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_payment_intent(
    payload: PaymentIntentCreate,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    try:
        result = payment_service.create_payment_intent(payload.booking_id, payload.payment_type)
    except DomainException as exc:
        handle_domain_exception(exc)
    return PaymentIntentResponse(
        payment_id=result.payment_id,
        client_secret=result.client_secret,
        amount=result.amount,
    )


@router.post("/payments/{payment_id}/confirm", response_model=PaymentConfirmResponse)
def confirm_payment(
    payload: PaymentConfirmRequest,
    payment_id: PaymentId,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentConfirmResponse:
    """
    Confirm a payment.

    A payment the gateway has not settled is reported with
    ``success: false`` and the current status rather than as an error.
    """
    try:
        result = payment_service.confirm_payment(payment_id, payload.payment_intent_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return PaymentConfirmResponse(
        success=result.success,
        status=result.status,
        payment_id=result.payment.id,
    )


@router.post("/payments/{payment_id}/refund", response_model=PaymentResponse)
def refund_payment(
    payment_id: PaymentId,
    payload: RefundRequest,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    try:
        payment = payment_service.refund_payment(
            payment_id, amount=payload.amount, reason=payload.reason
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return PaymentResponse.model_validate(payment)


@router.get("/bookings/{booking_id}/payments", response_model=List[PaymentResponse])
def list_booking_payments(
    booking_id: BookingId,
    payment_service: PaymentService = Depends(get_payment_service),
) -> List[PaymentResponse]:
    try:
        payments = payment_service.get_booking_payments(booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [PaymentResponse.model_validate(payment) for payment in payments]
