from types import SimpleNamespace
from unittest.mock import patch

from pydantic import SecretStr
import pytest
import stripe

from studio_booking.core.exceptions import PaymentGatewayException
from studio_booking.integrations.payment_gateway import FakePaymentGateway, StripePaymentGateway


class TestStripePaymentGateway:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            StripePaymentGateway(api_key=SecretStr(""))

    def test_create_charge_intent(self):
        gateway = StripePaymentGateway(api_key="sk_test_123")
        intent = SimpleNamespace(id="pi_1", client_secret="pi_1_secret", status="requires_payment_method")

        with patch.object(stripe.PaymentIntent, "create", return_value=intent) as create:
            result = gateway.create_charge_intent(5000, "usd", {"booking_id": "B1"})

        assert result.intent_id == "pi_1"
        assert result.client_secret == "pi_1_secret"
        assert create.call_args.kwargs["amount"] == 5000
        assert create.call_args.kwargs["metadata"] == {"booking_id": "B1"}

    def test_stripe_errors_become_gateway_exceptions(self):
        gateway = StripePaymentGateway(api_key="sk_test_123")

        with patch.object(
            stripe.PaymentIntent, "create", side_effect=stripe.StripeError("card network down")
        ):
            with pytest.raises(PaymentGatewayException) as exc_info:
                gateway.create_charge_intent(5000, "usd", {})

        assert exc_info.value.status_code == 502

    @pytest.mark.parametrize(
        "latest_charge,expected",
        [("ch_1", "ch_1"), (SimpleNamespace(id="ch_2"), "ch_2"), (None, None)],
    )
    def test_retrieve_intent_reads_latest_charge(self, latest_charge, expected):
        gateway = StripePaymentGateway(api_key="sk_test_123")
        intent = SimpleNamespace(id="pi_1", status="succeeded", latest_charge=latest_charge)

        with patch.object(stripe.PaymentIntent, "retrieve", return_value=intent):
            status = gateway.retrieve_intent("pi_1")

        assert status.status == "succeeded"
        assert status.charge_id == expected

    def test_partial_refund_passes_amount_and_reason(self):
        gateway = StripePaymentGateway(api_key="sk_test_123")
        refund = SimpleNamespace(id="re_1", amount=2000, status="succeeded")

        with patch.object(stripe.Refund, "create", return_value=refund) as create:
            result = gateway.refund("ch_1", amount=2000, reason="requested_by_customer")

        create.assert_called_once_with(charge="ch_1", amount=2000, reason="requested_by_customer")
        assert result.refund_id == "re_1"

    def test_full_refund_omits_amount(self):
        gateway = StripePaymentGateway(api_key="sk_test_123")
        refund = SimpleNamespace(id="re_1", amount=5000, status="succeeded")

        with patch.object(stripe.Refund, "create", return_value=refund) as create:
            gateway.refund("ch_1")

        create.assert_called_once_with(charge="ch_1")


class TestFakePaymentGateway:
    def test_intent_lifecycle(self):
        gateway = FakePaymentGateway()
        intent = gateway.create_charge_intent(5000, "usd", {})

        assert gateway.retrieve_intent(intent.intent_id).status == "requires_payment_method"
        gateway.succeed_intent(intent.intent_id)
        status = gateway.retrieve_intent(intent.intent_id)

        assert status.status == "succeeded"
        assert status.charge_id.startswith("ch_fake_")
        assert gateway.retrieve_calls == 2

    def test_fail_next_fails_exactly_once(self):
        gateway = FakePaymentGateway()
        gateway.fail_next = "boom"

        with pytest.raises(PaymentGatewayException):
            gateway.create_charge_intent(100, "usd", {})
        gateway.create_charge_intent(100, "usd", {})

    def test_refund_unknown_charge(self):
        with pytest.raises(PaymentGatewayException):
            FakePaymentGateway().refund("ch_missing")
