from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from studio_booking.core.exceptions import NotFoundException
from studio_booking.models import Client
from studio_booking.repositories.client_repository import ClientRepository
from studio_booking.services.client_service import ClientService


def test_creates_client_with_normalized_email(db, studio):
    client, created = ClientService(db).get_or_create_client(
        studio.id, "  Nina@Example.COM ", "Nina", phone="555-0100"
    )

    assert created is True
    assert client.email == "nina@example.com"
    assert client.phone == "555-0100"


def test_returns_existing_client_case_insensitively(db, studio):
    service = ClientService(db)
    first, _ = service.get_or_create_client(studio.id, "nina@example.com", "Nina")

    second, created = service.get_or_create_client(studio.id, "NINA@example.com", "Nina B")

    assert created is False
    assert second.id == first.id
    assert db.query(Client).count() == 1


def test_same_email_is_a_separate_client_per_studio(db, studio, make_studio):
    other = make_studio(name="Other")
    service = ClientService(db)

    a, _ = service.get_or_create_client(studio.id, "nina@example.com", "Nina")
    b, created = service.get_or_create_client(other.id, "nina@example.com", "Nina")

    assert created is True
    assert a.id != b.id


def test_lost_insert_race_returns_winner():
    db = MagicMock()
    db.flush.side_effect = IntegrityError("stmt", {}, Exception("duplicate key"))
    repository = ClientRepository(db)
    winner = Client(studio_id="S1", email="race@example.com", name="Nina")
    lookups = iter([None, winner])

    with patch.object(repository, "get_by_email", side_effect=lambda *_: next(lookups)):
        client, created = repository.get_or_create("S1", "race@example.com", "Nina")

    assert created is False
    assert client is winner


def test_unknown_studio(db):
    with pytest.raises(NotFoundException):
        ClientService(db).get_or_create_client("01ARZ3NDEKTSV4RRFFQ69G5FAV", "a@b.com", "A")


def test_client_bookings_most_recent_first(db, studio, client_record, make_booking):
    early = make_booking(
        studio,
        client_record,
        datetime(2030, 1, 7, 10, tzinfo=timezone.utc),
        datetime(2030, 1, 7, 11, tzinfo=timezone.utc),
    )
    late = make_booking(
        studio,
        client_record,
        datetime(2030, 2, 7, 10, tzinfo=timezone.utc),
        datetime(2030, 2, 7, 11, tzinfo=timezone.utc),
    )

    bookings = ClientService(db).get_client_bookings(client_record.id)

    assert [b.id for b in bookings] == [late.id, early.id]


def test_studio_clients(db, studio, make_client, make_studio):
    make_client(studio, name="Zed")
    make_client(studio, name="Amy")
    make_client(make_studio(name="Other"), name="Elsewhere")

    clients = ClientService(db).get_studio_clients(studio.id)

    assert [c.name for c in clients] == ["Amy", "Zed"]
