from .payment_gateway import (
    ChargeIntent,
    FakePaymentGateway,
    IntentStatus,
    PaymentGateway,
    RefundResult,
    StripePaymentGateway,
)

__all__ = [
    "ChargeIntent",
    "FakePaymentGateway",
    "IntentStatus",
    "PaymentGateway",
    "RefundResult",
    "StripePaymentGateway",
]
