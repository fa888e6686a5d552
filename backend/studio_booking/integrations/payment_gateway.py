"""Payment gateway capability backed by Stripe PaymentIntents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
import threading
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import SecretStr
import stripe

from ..core.exceptions import PaymentGatewayException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeIntent:
    intent_id: str
    client_secret: str
    status: str


@dataclass(frozen=True)
class IntentStatus:
    intent_id: str
    status: str
    charge_id: Optional[str] = None


@dataclass(frozen=True)
class RefundResult:
    refund_id: str
    amount: int
    status: str


class PaymentGateway(ABC):
    """
    What the payment ledger needs from a gateway.

    Amounts cross this boundary in minor currency units (cents).
    """

    @abstractmethod
    def create_charge_intent(
        self, amount: int, currency: str, metadata: Dict[str, str]
    ) -> ChargeIntent:
        """Create a charge intent for ``amount`` minor units."""

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> IntentStatus:
        """Fetch the gateway's current view of an intent."""

    @abstractmethod
    def refund(self, charge_id: str, amount: Optional[int] = None, reason: Optional[str] = None) -> RefundResult:
        """Refund a charge, fully when ``amount`` is None."""


class StripePaymentGateway(PaymentGateway):
    """Thin wrapper over the Stripe SDK that maps SDK errors to domain errors."""

    def __init__(self, *, api_key: str | SecretStr, timeout_seconds: int = 8) -> None:
        secret_value = api_key.get_secret_value() if isinstance(api_key, SecretStr) else api_key
        if not secret_value:
            raise ValueError("Stripe API key must be provided")

        stripe.api_key = secret_value
        # Bounded network calls; failures surface to the caller instead of retrying here
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout_seconds)
        stripe.max_network_retries = 0

    def create_charge_intent(
        self, amount: int, currency: str, metadata: Dict[str, str]
    ) -> ChargeIntent:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as exc:
            logger.error(
                "stripe_create_intent_failed",
                extra={"amount": amount, "currency": currency, "error": str(exc)},
            )
            raise PaymentGatewayException(
                "Failed to create payment intent", details={"error": str(exc)}
            ) from exc

        return ChargeIntent(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
        )

    def retrieve_intent(self, intent_id: str) -> IntentStatus:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id)
        except stripe.StripeError as exc:
            logger.error(
                "stripe_retrieve_intent_failed",
                extra={"intent_id": intent_id, "error": str(exc)},
            )
            raise PaymentGatewayException(
                "Failed to retrieve payment intent", details={"intent_id": intent_id}
            ) from exc

        latest_charge: Any = getattr(intent, "latest_charge", None)
        charge_id = latest_charge if isinstance(latest_charge, str) else getattr(latest_charge, "id", None)
        return IntentStatus(intent_id=intent.id, status=intent.status, charge_id=charge_id)

    def refund(self, charge_id: str, amount: Optional[int] = None, reason: Optional[str] = None) -> RefundResult:
        params: Dict[str, Any] = {"charge": charge_id}
        if amount is not None:
            params["amount"] = amount
        if reason:
            params["reason"] = reason
        try:
            refund = stripe.Refund.create(**params)
        except stripe.StripeError as exc:
            logger.error(
                "stripe_refund_failed",
                extra={"charge_id": charge_id, "amount": amount, "error": str(exc)},
            )
            raise PaymentGatewayException(
                "Failed to refund payment", details={"charge_id": charge_id}
            ) from exc

        return RefundResult(refund_id=refund.id, amount=refund.amount, status=refund.status)


@dataclass
class _FakeIntent:
    intent_id: str
    amount: int
    currency: str
    metadata: Dict[str, str]
    status: str = "requires_payment_method"
    charge_id: Optional[str] = None
    refunds: Dict[str, int] = field(default_factory=dict)


class FakePaymentGateway(PaymentGateway):
    """
    In-memory gateway for local development and tests.

    Intents start in ``requires_payment_method``; tests drive them forward
    with ``set_intent_status`` or ``succeed_intent``.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._lock = threading.Lock()
        self._intents: Dict[str, _FakeIntent] = {}
        self.fail_next: Optional[str] = None
        self.retrieve_calls = 0

    def _maybe_fail(self) -> None:
        if self.fail_next:
            message, self.fail_next = self.fail_next, None
            raise PaymentGatewayException(message)

    def create_charge_intent(
        self, amount: int, currency: str, metadata: Dict[str, str]
    ) -> ChargeIntent:
        self._maybe_fail()
        intent_id = f"pi_fake_{uuid4().hex}"
        with self._lock:
            self._intents[intent_id] = _FakeIntent(
                intent_id=intent_id, amount=amount, currency=currency, metadata=dict(metadata)
            )
        self._logger.debug("Fake intent created", extra={"intent_id": intent_id, "amount": amount})
        return ChargeIntent(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            status="requires_payment_method",
        )

    def retrieve_intent(self, intent_id: str) -> IntentStatus:
        self._maybe_fail()
        self.retrieve_calls += 1
        intent = self._intents.get(intent_id)
        if intent is None:
            raise PaymentGatewayException(
                "Failed to retrieve payment intent", details={"intent_id": intent_id}
            )
        return IntentStatus(intent_id=intent_id, status=intent.status, charge_id=intent.charge_id)

    def refund(self, charge_id: str, amount: Optional[int] = None, reason: Optional[str] = None) -> RefundResult:
        self._maybe_fail()
        intent = next((i for i in self._intents.values() if i.charge_id == charge_id), None)
        if intent is None:
            raise PaymentGatewayException("Failed to refund payment", details={"charge_id": charge_id})
        refund_id = f"re_fake_{uuid4().hex}"
        refunded = intent.amount if amount is None else amount
        with self._lock:
            intent.refunds[refund_id] = refunded
        return RefundResult(refund_id=refund_id, amount=refunded, status="succeeded")

    # Test helpers

    def set_intent_status(self, intent_id: str, status: str) -> None:
        with self._lock:
            intent = self._intents[intent_id]
            intent.status = status
            if status == "succeeded" and intent.charge_id is None:
                intent.charge_id = f"ch_fake_{uuid4().hex}"

    def succeed_intent(self, intent_id: str) -> None:
        self.set_intent_status(intent_id, "succeeded")

    def get_intent(self, intent_id: str) -> _FakeIntent:
        return self._intents[intent_id]
