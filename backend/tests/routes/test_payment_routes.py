from datetime import datetime, timedelta, timezone

import pytest

START = datetime(2030, 1, 7, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def pending_booking(studio, client_record, make_booking):
    return make_booking(
        studio, client_record, START, START + timedelta(hours=1), status="PENDING"
    )


def _start_deposit(api_client, booking):
    response = api_client.post(
        "/api/v1/payments/intents",
        json={"booking_id": booking.id, "payment_type": "DEPOSIT"},
    )
    assert response.status_code == 201
    return response.json()


def _intent_id(api_client, booking, payment_id):
    payments = api_client.get(f"/api/v1/bookings/{booking.id}/payments").json()
    return next(p["stripe_payment_intent_id"] for p in payments if p["id"] == payment_id)


class TestPaymentEndpoints:
    def test_create_deposit_intent(self, api_client, pending_booking):
        body = _start_deposit(api_client, pending_booking)

        assert body["amount"] == 50.0
        assert body["client_secret"]

        payments = api_client.get(f"/api/v1/bookings/{pending_booking.id}/payments").json()
        assert [p["status"] for p in payments] == ["PENDING"]

    def test_confirm_settles_deposit(self, api_client, fake_gateway, pending_booking):
        payment_id = _start_deposit(api_client, pending_booking)["payment_id"]
        intent_id = _intent_id(api_client, pending_booking, payment_id)
        fake_gateway.succeed_intent(intent_id)

        response = api_client.post(
            f"/api/v1/payments/{payment_id}/confirm", json={"payment_intent_id": intent_id}
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": "SUCCEEDED",
            "payment_id": payment_id,
        }
        booking = api_client.get(f"/api/v1/bookings/{pending_booking.id}").json()
        assert booking["deposit_paid"] is True
        assert booking["status"] == "CONFIRMED"

    def test_unsettled_confirm_is_not_an_error(self, api_client, pending_booking):
        payment_id = _start_deposit(api_client, pending_booking)["payment_id"]
        intent_id = _intent_id(api_client, pending_booking, payment_id)

        response = api_client.post(
            f"/api/v1/payments/{payment_id}/confirm", json={"payment_intent_id": intent_id}
        )

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["status"] == "PENDING"

    def test_confirm_with_foreign_intent(self, api_client, pending_booking):
        payment_id = _start_deposit(api_client, pending_booking)["payment_id"]

        response = api_client.post(
            f"/api/v1/payments/{payment_id}/confirm", json={"payment_intent_id": "pi_other"}
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "PAYMENT_INTENT_MISMATCH"

    def test_partial_refund(self, api_client, fake_gateway, pending_booking):
        payment_id = _start_deposit(api_client, pending_booking)["payment_id"]
        intent_id = _intent_id(api_client, pending_booking, payment_id)
        fake_gateway.succeed_intent(intent_id)
        api_client.post(
            f"/api/v1/payments/{payment_id}/confirm", json={"payment_intent_id": intent_id}
        )

        response = api_client.post(
            f"/api/v1/payments/{payment_id}/refund",
            json={"amount": "20.00", "reason": "Session cut short"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "REFUNDED"
        assert body["refunded_amount"] == 20.0

    def test_refund_before_charge(self, api_client, pending_booking):
        payment_id = _start_deposit(api_client, pending_booking)["payment_id"]

        response = api_client.post(f"/api/v1/payments/{payment_id}/refund", json={})

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "PAYMENT_NOT_CHARGED"

    def test_gateway_failure_maps_to_bad_gateway(self, api_client, fake_gateway, pending_booking):
        fake_gateway.fail_next = "card network down"

        response = api_client.post(
            "/api/v1/payments/intents",
            json={"booking_id": pending_booking.id, "payment_type": "DEPOSIT"},
        )

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "PAYMENT_GATEWAY_ERROR"
        assert api_client.get(f"/api/v1/bookings/{pending_booking.id}/payments").json() == []

    def test_cancelled_booking_is_not_payable(
        self, api_client, studio, client_record, make_booking
    ):
        booking = make_booking(
            studio, client_record, START, START + timedelta(hours=1), status="CANCELLED"
        )

        response = api_client.post(
            "/api/v1/payments/intents",
            json={"booking_id": booking.id, "payment_type": "FULL"},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "BOOKING_NOT_PAYABLE"
