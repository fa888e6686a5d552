from datetime import datetime, timedelta, timezone

import pytest

START = datetime(2030, 1, 7, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def booking_payload(studio, client_record):
    return {
        "studio_id": studio.id,
        "client_id": client_record.id,
        "start_time": "2030-01-07T10:00:00Z",
        "duration_minutes": 60,
    }


class TestCreateBooking:
    def test_creates_pending_booking_with_deposit(self, api_client, booking_payload):
        response = api_client.post("/api/v1/bookings", json=booking_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["total_amount"] == 100.0
        assert body["deposit_amount"] == 50.0
        assert body["end_time"].startswith("2030-01-07T11:00:00")

    def test_overlapping_request_is_a_conflict(self, api_client, booking_payload):
        assert api_client.post("/api/v1/bookings", json=booking_payload).status_code == 201

        overlapping = {**booking_payload, "start_time": "2030-01-07T10:30:00Z"}
        response = api_client.post("/api/v1/bookings", json=overlapping)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "BOOKING_CONFLICT"
        assert set(detail) == {"message", "code", "details"}

    def test_offset_times_are_normalized(self, api_client, booking_payload):
        payload = {**booking_payload, "start_time": "2030-01-07T05:00:00-05:00"}

        response = api_client.post("/api/v1/bookings", json=payload)

        assert response.status_code == 201
        assert response.json()["start_time"].startswith("2030-01-07T10:00:00")

    def test_naive_start_time_is_rejected(self, api_client, booking_payload):
        payload = {**booking_payload, "start_time": "2030-01-07T10:00:00"}

        assert api_client.post("/api/v1/bookings", json=payload).status_code == 422

    def test_duration_below_studio_minimum(self, api_client, booking_payload):
        payload = {**booking_payload, "duration_minutes": 30}

        response = api_client.post("/api/v1/bookings", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "DURATION_TOO_SHORT"

    def test_unknown_client(self, api_client, booking_payload):
        payload = {**booking_payload, "client_id": "01HZZZZZZZZZZZZZZZZZZZZZZZ"}

        assert api_client.post("/api/v1/bookings", json=payload).status_code == 404


class TestBookingQueries:
    def test_get_booking(self, api_client, studio, client_record, make_booking):
        booking = make_booking(studio, client_record, START, START + timedelta(hours=2))

        response = api_client.get(f"/api/v1/bookings/{booking.id}")

        assert response.status_code == 200
        assert response.json()["id"] == booking.id

    def test_studio_calendar_filters(self, api_client, studio, client_record, make_booking):
        make_booking(studio, client_record, START, START + timedelta(hours=1))
        make_booking(
            studio,
            client_record,
            START + timedelta(days=1),
            START + timedelta(days=1, hours=1),
            status="CANCELLED",
        )

        everything = api_client.get(f"/api/v1/studios/{studio.id}/bookings").json()
        cancelled = api_client.get(
            f"/api/v1/studios/{studio.id}/bookings", params={"status": "CANCELLED"}
        ).json()
        first_day = api_client.get(
            f"/api/v1/studios/{studio.id}/bookings",
            params={"start_to": "2030-01-07T23:59:59Z"},
        ).json()

        assert len(everything) == 2
        assert [b["status"] for b in cancelled] == ["CANCELLED"]
        assert len(first_day) == 1


class TestBookingLifecycle:
    def test_status_change(self, api_client, studio, client_record, make_booking):
        booking = make_booking(studio, client_record, START, START + timedelta(hours=1))

        response = api_client.patch(
            f"/api/v1/bookings/{booking.id}/status", json={"status": "IN_PROGRESS"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "IN_PROGRESS"

    def test_illegal_transition(self, api_client, studio, client_record, make_booking):
        booking = make_booking(
            studio, client_record, START, START + timedelta(hours=1), status="COMPLETED"
        )

        response = api_client.patch(
            f"/api/v1/bookings/{booking.id}/status", json={"status": "PENDING"}
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_cancel_with_reason(self, api_client, studio, client_record, make_booking):
        booking = make_booking(studio, client_record, START, START + timedelta(hours=1))

        response = api_client.post(
            f"/api/v1/bookings/{booking.id}/cancel", json={"reason": "Band split up"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "CANCELLED"
        assert body["internal_notes"] == "Cancelled: Band split up. No cancellation fee"
        assert body["cancelled_at"] is not None

    def test_cancel_without_body(self, api_client, studio, client_record, make_booking):
        booking = make_booking(studio, client_record, START, START + timedelta(hours=1))

        response = api_client.post(f"/api/v1/bookings/{booking.id}/cancel")

        assert response.status_code == 200
        assert response.json()["internal_notes"].startswith("Cancelled: No reason provided.")

    def test_cancelled_slot_can_be_rebooked(self, api_client, booking_payload):
        first = api_client.post("/api/v1/bookings", json=booking_payload).json()
        api_client.post(f"/api/v1/bookings/{first['id']}/cancel")

        assert api_client.post("/api/v1/bookings", json=booking_payload).status_code == 201
