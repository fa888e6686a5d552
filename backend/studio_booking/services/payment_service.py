# backend/studio_booking/services/payment_service.py
"""
Payment ledger for the studio booking backend.

Tracks payment attempts against bookings and applies their settlement to
the booking. Payment state only ever moves on what the gateway reports:

    PENDING -> PROCESSING -> SUCCEEDED -> REFUNDED
    PENDING -> FAILED

Confirmation is idempotent. A payment already SUCCEEDED is returned as is,
without another gateway round trip and without re-applying booking effects.
Refunds do not touch the booking's paid flags or status.
"""

from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import MIN_PAYMENT_AMOUNT, REFUND_REASON
from ..core.exceptions import (
    BusinessRuleException,
    InvalidPaymentStateException,
    NotFoundException,
    PaymentGatewayException,
    PaymentNotChargedException,
    ValidationException,
)
from ..integrations.payment_gateway import PaymentGateway
from ..models.booking import Booking, BookingStatus
from ..models.payment import Payment, PaymentStatus, PaymentType
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.payment_repository import PaymentRepository
from .base import BaseService
from .pricing_service import to_minor_units, to_money

logger = logging.getLogger(__name__)

# Gateway intent status -> ledger status. Statuses the customer can still act on
# (requires_payment_method after a decline, requires_action, requires_confirmation)
# are absent, so the payment keeps its status and can still settle.
GATEWAY_STATUS_MAP: Dict[str, PaymentStatus] = {
    "succeeded": PaymentStatus.SUCCEEDED,
    "processing": PaymentStatus.PROCESSING,
    "canceled": PaymentStatus.FAILED,
}

NON_PAYABLE_BOOKING_STATUSES = {BookingStatus.CANCELLED.value, BookingStatus.NO_SHOW.value}


@dataclass(frozen=True)
class PaymentIntentResult:
    payment_id: str
    client_secret: str
    amount: Decimal


@dataclass(frozen=True)
class PaymentConfirmationResult:
    success: bool
    status: PaymentStatus
    payment: Payment


class PaymentService(BaseService):
    """Service for the payment ledger and its effect on bookings."""

    def __init__(
        self,
        db: Session,
        gateway: PaymentGateway,
        repository: Optional[PaymentRepository] = None,
    ):
        super().__init__(db)
        self.gateway = gateway
        self.repository = repository or RepositoryFactory.create_payment_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @staticmethod
    def amount_for(booking: Booking, payment_type: PaymentType) -> Decimal:
        """DEPOSIT = deposit, FINAL = total - deposit, FULL = total."""
        total = to_money(booking.total_amount)
        deposit = to_money(booking.deposit_amount)
        if payment_type == PaymentType.DEPOSIT:
            return deposit
        if payment_type == PaymentType.FINAL:
            return to_money(total - deposit)
        return total

    @staticmethod
    def _already_paid(booking: Booking, payment_type: PaymentType) -> bool:
        """A settled FINAL or FULL covers everything; a settled deposit covers DEPOSIT and FULL."""
        if booking.final_paid:
            return True
        return bool(booking.deposit_paid) and payment_type != PaymentType.FINAL

    @BaseService.measure_operation("create_payment_intent")
    def create_payment_intent(self, booking_id: str, payment_type: PaymentType) -> PaymentIntentResult:
        """
        Start a payment attempt for a booking.

        The gateway intent is created first; the PENDING ledger row is only
        written once the gateway has answered.

        Raises:
            NotFoundException: Unknown booking
            BusinessRuleException: Booking is cancelled or a no-show, or already
                settled for this payment type
            ValidationException: Amount below the gateway minimum
            PaymentGatewayException: Gateway call failed (nothing persisted)
        """
        payment_type = PaymentType(payment_type)
        booking = self.booking_repository.get_booking_with_details(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        if booking.status in NON_PAYABLE_BOOKING_STATUSES:
            raise BusinessRuleException(
                f"Cannot take payment for a booking in status {booking.status}",
                code="BOOKING_NOT_PAYABLE",
                details={"booking_id": booking_id, "status": booking.status},
            )
        if self._already_paid(booking, payment_type):
            raise BusinessRuleException(
                f"Booking already paid for a {payment_type.value} payment",
                code="ALREADY_PAID",
                details={"booking_id": booking_id, "payment_type": payment_type.value},
            )

        amount = self.amount_for(booking, payment_type)
        if amount < MIN_PAYMENT_AMOUNT:
            raise ValidationException(
                f"Payment amount must be at least {MIN_PAYMENT_AMOUNT}",
                code="PAYMENT_AMOUNT_TOO_SMALL",
                details={"amount": str(amount), "payment_type": payment_type.value},
            )

        metadata = {
            "booking_id": booking.id,
            "studio_id": booking.studio_id,
            "client_email": booking.client.email if booking.client else "",
            "payment_type": payment_type.value,
        }
        try:
            intent = self.gateway.create_charge_intent(
                to_minor_units(amount), settings.stripe_currency, metadata
            )
        except PaymentGatewayException:
            prometheus_metrics.record_payment("intent", "gateway_error")
            raise

        with self.transaction():
            payment = self.repository.create(
                booking_id=booking.id,
                amount=amount,
                currency=settings.stripe_currency,
                payment_type=payment_type.value,
                status=PaymentStatus.PENDING.value,
                stripe_payment_intent_id=intent.intent_id,
            )

        prometheus_metrics.record_payment("intent", PaymentStatus.PENDING.value)
        self.log_operation(
            "create_payment_intent",
            payment_id=payment.id,
            booking_id=booking.id,
            payment_type=payment_type.value,
            amount=str(amount),
        )
        return PaymentIntentResult(
            payment_id=payment.id, client_secret=intent.client_secret, amount=amount
        )

    @BaseService.measure_operation("confirm_payment")
    def confirm_payment(self, payment_id: str, external_intent_id: str) -> PaymentConfirmationResult:
        """
        Re-verify a payment with the gateway and settle it.

        The client's claim that a payment succeeded is never trusted; the
        gateway's intent status decides.

        Raises:
            NotFoundException: Unknown payment
            BusinessRuleException: Intent id does not belong to this payment
            InvalidPaymentStateException: Payment already FAILED or REFUNDED
            PaymentGatewayException: Gateway lookup failed (payment unchanged)
        """
        with self.transaction():
            payment = self.repository.get_for_update(payment_id)
            if not payment:
                raise NotFoundException("Payment not found", details={"payment_id": payment_id})

            if payment.stripe_payment_intent_id != external_intent_id:
                raise BusinessRuleException(
                    "Payment intent does not match this payment",
                    code="PAYMENT_INTENT_MISMATCH",
                    details={"payment_id": payment_id},
                )

            if payment.status == PaymentStatus.SUCCEEDED.value:
                prometheus_metrics.record_payment("confirm", "already_succeeded")
                return PaymentConfirmationResult(True, PaymentStatus.SUCCEEDED, payment)

            if payment.status in {PaymentStatus.FAILED.value, PaymentStatus.REFUNDED.value}:
                raise InvalidPaymentStateException(payment.id, payment.status, "confirm")

            intent = self.gateway.retrieve_intent(external_intent_id)
            new_status = GATEWAY_STATUS_MAP.get(intent.status)

            if new_status == PaymentStatus.SUCCEEDED:
                payment.status = PaymentStatus.SUCCEEDED.value
                payment.stripe_charge_id = intent.charge_id
                self._apply_settlement(payment)
            elif new_status is not None:
                payment.status = new_status.value

        status = PaymentStatus(payment.status)
        prometheus_metrics.record_payment("confirm", status.value)
        self.log_operation(
            "confirm_payment",
            payment_id=payment.id,
            booking_id=payment.booking_id,
            gateway_status=intent.status,
            payment_status=status.value,
        )
        return PaymentConfirmationResult(status == PaymentStatus.SUCCEEDED, status, payment)

    def _apply_settlement(self, payment: Payment) -> None:
        booking = payment.booking
        if payment.payment_type == PaymentType.DEPOSIT.value:
            booking.mark_deposit_paid()
        else:
            booking.mark_final_paid()

    @BaseService.measure_operation("refund_payment")
    def refund_payment(
        self,
        payment_id: str,
        amount: Optional[Decimal] = None,
        reason: Optional[str] = None,
    ) -> Payment:
        """
        Refund a settled payment, fully or partially.

        Raises:
            NotFoundException: Unknown payment
            PaymentNotChargedException: No gateway charge recorded
            InvalidPaymentStateException: Payment is not SUCCEEDED
            ValidationException: Partial amount out of range
            PaymentGatewayException: Gateway refund failed (payment unchanged)
        """
        with self.transaction():
            payment = self.repository.get_for_update(payment_id)
            if not payment:
                raise NotFoundException("Payment not found", details={"payment_id": payment_id})
            if not payment.stripe_charge_id:
                raise PaymentNotChargedException(payment.id)
            if payment.status != PaymentStatus.SUCCEEDED.value:
                raise InvalidPaymentStateException(payment.id, payment.status, "refund")

            refund_amount = to_money(amount) if amount is not None else to_money(payment.amount)
            if refund_amount <= 0 or refund_amount > to_money(payment.amount):
                raise ValidationException(
                    "Refund amount must be positive and not exceed the payment amount",
                    code="INVALID_REFUND_AMOUNT",
                    details={"amount": str(refund_amount), "payment_amount": str(payment.amount)},
                )

            try:
                refund = self.gateway.refund(
                    payment.stripe_charge_id,
                    amount=to_minor_units(refund_amount) if amount is not None else None,
                    reason=REFUND_REASON,
                )
            except PaymentGatewayException:
                prometheus_metrics.record_payment("refund", "gateway_error")
                raise

            payment.status = PaymentStatus.REFUNDED.value
            payment.stripe_refund_id = refund.refund_id
            payment.refunded_amount = refund_amount
            payment.refund_reason = reason

        prometheus_metrics.record_payment("refund", PaymentStatus.REFUNDED.value)
        self.log_operation(
            "refund_payment",
            payment_id=payment.id,
            booking_id=payment.booking_id,
            refunded_amount=str(refund_amount),
        )
        return payment

    def get_booking_payments(self, booking_id: str) -> List[Payment]:
        if not self.booking_repository.exists(id=booking_id):
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return self.repository.get_payments_for_booking(booking_id)
