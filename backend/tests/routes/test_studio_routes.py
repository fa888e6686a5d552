from datetime import datetime, timedelta, timezone
from decimal import Decimal

START = datetime(2030, 1, 7, 10, 0, tzinfo=timezone.utc)

STUDIO_PAYLOAD = {
    "name": "Night Owl Recording",
    "email": "nightowl@example.com",
    "timezone": "UTC",
    "hourly_rate": 80,
    "booking_buffer_minutes": 15,
}


class TestStudioEndpoints:
    def test_create_and_fetch_studio(self, api_client):
        created = api_client.post("/api/v1/studios", json=STUDIO_PAYLOAD)

        assert created.status_code == 201
        body = created.json()
        assert body["hourly_rate"] == 80.0
        assert body["min_booking_minutes"] == 60

        fetched = api_client.get(f"/api/v1/studios/{body['id']}")
        assert fetched.status_code == 200
        detail = fetched.json()
        assert detail["rooms"] == []
        assert detail["reviews"] == []

    def test_unknown_studio_uses_error_envelope(self, api_client):
        response = api_client.get("/api/v1/studios/01HZZZZZZZZZZZZZZZZZZZZZZZ")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NotFoundException"

    def test_malformed_studio_id_is_rejected(self, api_client):
        response = api_client.get("/api/v1/studios/not-a-ulid")

        assert response.status_code == 422

    def test_unknown_fields_are_rejected(self, api_client):
        response = api_client.post("/api/v1/studios", json={**STUDIO_PAYLOAD, "owner": "me"})

        assert response.status_code == 422

    def test_update_studio_settings(self, api_client, studio):
        response = api_client.patch(
            f"/api/v1/studios/{studio.id}", json={"booking_buffer_minutes": 30}
        )

        assert response.status_code == 200
        assert response.json()["booking_buffer_minutes"] == 30

    def test_rooms_and_services(self, api_client, studio):
        room = api_client.post(f"/api/v1/studios/{studio.id}/rooms", json={"name": "Booth A"})
        service = api_client.post(
            f"/api/v1/studios/{studio.id}/services",
            json={"name": "Mastering", "price": "45.50", "category": "MASTERING"},
        )

        assert room.status_code == 201
        assert service.status_code == 201
        assert service.json()["price"] == 45.5
        assert [r["name"] for r in api_client.get(f"/api/v1/studios/{studio.id}/rooms").json()] == [
            "Booth A"
        ]
        assert len(api_client.get(f"/api/v1/studios/{studio.id}/services").json()) == 1

    def test_stats_for_empty_studio(self, api_client, studio):
        response = api_client.get(f"/api/v1/studios/{studio.id}/stats")

        assert response.status_code == 200
        assert response.json() == {
            "total_bookings": 0,
            "total_revenue": 0.0,
            "average_rating": None,
            "upcoming_bookings": 0,
        }


class TestAvailabilityEndpoints:
    def test_replace_and_list_rules(self, api_client, studio):
        rules = [
            {"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"},
            {"day_of_week": 1, "start_time": "13:00", "end_time": "17:00"},
        ]

        response = api_client.put(f"/api/v1/studios/{studio.id}/availability", json={"rules": rules})

        assert response.status_code == 200
        listed = api_client.get(f"/api/v1/studios/{studio.id}/availability").json()
        assert [(r["start_time"], r["end_time"]) for r in listed] == [
            ("09:00", "12:00"),
            ("13:00", "17:00"),
        ]

    def test_inverted_rule_is_rejected(self, api_client, studio):
        response = api_client.put(
            f"/api/v1/studios/{studio.id}/availability",
            json={"rules": [{"day_of_week": 1, "start_time": "17:00", "end_time": "09:00"}]},
        )

        assert response.status_code == 422

    def test_slots_exclude_buffered_booking(
        self, api_client, studio, client_record, make_rule, make_booking
    ):
        make_rule(studio, day_of_week=1, start_time="09:00", end_time="17:00")
        make_booking(studio, client_record, START, START + timedelta(hours=1))

        response = api_client.get(
            f"/api/v1/studios/{studio.id}/slots",
            params={"date": "2030-01-07", "duration_minutes": 60},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["date"] == "2030-01-07"
        starts = [slot["start"] for slot in body["slots"]]
        assert len(starts) == 10
        assert starts[0].startswith("2030-01-07T11:30:00")

    def test_slots_reject_short_duration(self, api_client, studio, make_rule):
        make_rule(studio)

        response = api_client.get(
            f"/api/v1/studios/{studio.id}/slots",
            params={"date": "2030-01-07", "duration_minutes": 15},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "DURATION_TOO_SHORT"


def test_money_serializes_as_float(api_client, make_studio):
    studio = make_studio(hourly_rate=Decimal("99.99"))

    response = api_client.get(f"/api/v1/studios/{studio.id}")

    assert response.json()["hourly_rate"] == 99.99
