from unittest.mock import patch

from pydantic import SecretStr
import pytest

from studio_booking.api.dependencies import services as services_deps
from studio_booking.integrations import FakePaymentGateway, StripePaymentGateway


@pytest.fixture(autouse=True)
def _clear_gateway_cache():
    services_deps.get_payment_gateway.cache_clear()
    yield
    services_deps.get_payment_gateway.cache_clear()


def test_fake_gateway_when_configured():
    with patch.object(services_deps.settings, "payment_gateway", "fake"):
        assert isinstance(services_deps.get_payment_gateway(), FakePaymentGateway)


def test_missing_key_falls_back_outside_production():
    with patch.object(services_deps.settings, "payment_gateway", "stripe"), patch.object(
        services_deps.settings, "stripe_secret_key", SecretStr("")
    ):
        assert isinstance(services_deps.get_payment_gateway(), FakePaymentGateway)


def test_missing_key_is_fatal_in_production():
    with patch.object(services_deps.settings, "payment_gateway", "stripe"), patch.object(
        services_deps.settings, "stripe_secret_key", SecretStr("")
    ), patch.object(services_deps.settings, "environment", "production"):
        with pytest.raises(ValueError):
            services_deps.get_payment_gateway()


def test_stripe_gateway_with_key():
    with patch.object(services_deps.settings, "payment_gateway", "stripe"), patch.object(
        services_deps.settings, "stripe_secret_key", SecretStr("sk_test_123")
    ):
        assert isinstance(services_deps.get_payment_gateway(), StripePaymentGateway)
