from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from studio_booking.core.exceptions import NotFoundException, ValidationException
from studio_booking.models import Payment, Review
from studio_booking.services.studio_service import StudioService

NOW = datetime(2030, 1, 1, 12, tzinfo=timezone.utc)


def test_create_studio_applies_defaults(db):
    studio = StudioService(db).create_studio({"name": "Echo Chamber", "email": "echo-chamber@example.com"})

    assert studio.hourly_rate == Decimal("100.00")
    assert studio.booking_buffer_minutes == 15
    assert studio.min_booking_minutes == 60
    assert studio.max_booking_minutes == 480
    assert studio.require_deposit is True
    assert studio.deposit_type == "PERCENTAGE"
    assert studio.cancellation_hours == 24
    assert studio.timezone == "America/New_York"
    assert len(studio.id) == 26


@pytest.mark.parametrize(
    "overrides,code",
    [
        ({"min_booking_minutes": 120, "max_booking_minutes": 60}, "INVALID_DURATION_LIMITS"),
        ({"deposit_amount": Decimal("150")}, "INVALID_DEPOSIT_AMOUNT"),
        ({"cancellation_fee_percent": Decimal("101")}, "INVALID_CANCELLATION_FEE"),
        ({"timezone": "Mars/Olympus_Mons"}, "INVALID_TIMEZONE"),
    ],
)
def test_create_studio_rejects_inconsistent_settings(db, overrides, code):
    with pytest.raises(ValidationException) as exc_info:
        StudioService(db).create_studio({"name": "X", "email": "studio-x@example.com", **overrides})

    assert exc_info.value.code == code


def test_fixed_deposit_may_exceed_one_hundred(db):
    studio = StudioService(db).create_studio(
        {"name": "X", "email": "studio-x@example.com", "deposit_type": "FIXED", "deposit_amount": Decimal("150")}
    )

    assert studio.deposit_amount == Decimal("150")


def test_update_studio_validates_against_current_values(db, studio):
    service = StudioService(db)

    with pytest.raises(ValidationException):
        service.update_studio(studio.id, {"min_booking_minutes": 600})

    updated = service.update_studio(studio.id, {"hourly_rate": Decimal("120.00"), "name": "Renamed"})
    assert updated.hourly_rate == Decimal("120.00")
    assert updated.name == "Renamed"
    assert updated.min_booking_minutes == 60


def test_update_studio_ignores_unknown_fields(db, studio):
    updated = StudioService(db).update_studio(studio.id, {"id": "hijack", "owner_id": "someone"})

    assert updated.id == studio.id


def test_get_unknown_studio(db):
    with pytest.raises(NotFoundException):
        StudioService(db).get_studio("01ARZ3NDEKTSV4RRFFQ69G5FAV")


def test_rooms_and_services(db, studio):
    service = StudioService(db)
    service.add_room(studio.id, {"name": "Booth", "capacity": 2})
    service.add_service(studio.id, {"name": "Mastering", "price": Decimal("80"), "category": "MASTERING"})
    service.add_service(
        studio.id, {"name": "Archived", "price": Decimal("10"), "is_active": False}
    )

    assert [room.name for room in service.list_rooms(studio.id)] == ["Booth"]
    assert len(service.list_services(studio.id)) == 2
    assert [s.name for s in service.list_services(studio.id, active_only=True)] == ["Mastering"]


def test_negative_service_price_rejected(db, studio):
    with pytest.raises(ValidationException):
        StudioService(db).add_service(studio.id, {"name": "Free money", "price": Decimal("-1")})


def test_studio_stats(db, studio, client_record, make_booking):
    future = make_booking(
        studio, client_record, NOW + timedelta(days=1), NOW + timedelta(days=1, hours=1)
    )
    completed = make_booking(
        studio,
        client_record,
        NOW - timedelta(days=1),
        NOW - timedelta(days=1) + timedelta(hours=1),
        status="COMPLETED",
    )
    make_booking(
        studio,
        client_record,
        NOW + timedelta(days=2),
        NOW + timedelta(days=2, hours=1),
        status="CANCELLED",
    )
    db.add_all(
        [
            Payment(booking_id=completed.id, amount=Decimal("100.00"), payment_type="FULL", status="SUCCEEDED"),
            Payment(booking_id=future.id, amount=Decimal("50.00"), payment_type="DEPOSIT", status="PENDING"),
            Review(booking_id=completed.id, studio_id=studio.id, client_id=client_record.id, rating=4),
        ]
    )
    db.commit()

    stats = StudioService(db).get_studio_stats(studio.id, now=NOW)

    assert stats["total_bookings"] == 3
    assert stats["total_revenue"] == Decimal("100.00")
    assert stats["average_rating"] == 4.0
    assert stats["upcoming_bookings"] == 1


def test_stats_for_empty_studio(db, studio):
    stats = StudioService(db).get_studio_stats(studio.id, now=NOW)

    assert stats == {
        "total_bookings": 0,
        "total_revenue": Decimal("0.00"),
        "average_rating": None,
        "upcoming_bookings": 0,
    }
