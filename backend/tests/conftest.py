"""
Shared fixtures for the studio booking test suite.

Every test gets a fresh in-memory SQLite schema. The settings module reads
the environment at import, so the overrides below must run before any
``studio_booking`` import.
"""

from datetime import datetime, timezone
from decimal import Decimal
import os
from typing import Any, Callable, Dict, Generator, Optional

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["PAYMENT_GATEWAY"] = "fake"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from studio_booking import models  # noqa: E402,F401
from studio_booking.api.dependencies.database import get_db  # noqa: E402
from studio_booking.api.dependencies.services import get_payment_gateway  # noqa: E402
from studio_booking.database import Base  # noqa: E402
from studio_booking.integrations import FakePaymentGateway  # noqa: E402
from studio_booking.models import (  # noqa: E402
    AvailabilityRule,
    Booking,
    Client,
    Room,
    Studio,
    StudioService,
)
from studio_booking.services.base import BaseService  # noqa: E402

# Monday in January (EST, UTC-5)
MONDAY = datetime(2030, 1, 7).date()


def utc(year: int, month: int, day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(autouse=True)
def _reset_service_metrics() -> Generator[None, None, None]:
    yield
    BaseService._class_metrics.clear()


@pytest.fixture
def fake_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


# Factories


@pytest.fixture
def make_studio(db: Session) -> Callable[..., Studio]:
    def _make(**overrides: Any) -> Studio:
        values: Dict[str, Any] = {
            "name": "Blue Room Sound",
            "email": "blueroom@example.com",
            "timezone": "UTC",
            "hourly_rate": Decimal("100.00"),
            "booking_buffer_minutes": 15,
            "min_booking_minutes": 60,
            "max_booking_minutes": 480,
            "require_deposit": True,
            "deposit_type": "PERCENTAGE",
            "deposit_amount": Decimal("50.00"),
            "cancellation_hours": 24,
            "cancellation_fee_percent": Decimal("50.00"),
        }
        values.update(overrides)
        studio = Studio(**values)
        db.add(studio)
        db.commit()
        return studio

    return _make


@pytest.fixture
def studio(make_studio: Callable[..., Studio]) -> Studio:
    return make_studio()


@pytest.fixture
def make_client(db: Session) -> Callable[..., Client]:
    counter = {"n": 0}

    def _make(studio: Studio, email: Optional[str] = None, name: str = "Nina Artist") -> Client:
        counter["n"] += 1
        client = Client(
            studio_id=studio.id,
            email=email or f"artist{counter['n']}@example.com",
            name=name,
        )
        db.add(client)
        db.commit()
        return client

    return _make


@pytest.fixture
def client_record(studio: Studio, make_client: Callable[..., Client]) -> Client:
    return make_client(studio)


@pytest.fixture
def make_room(db: Session) -> Callable[..., Room]:
    def _make(studio: Studio, name: str = "Live Room", is_active: bool = True) -> Room:
        room = Room(studio_id=studio.id, name=name, capacity=4, is_active=is_active)
        db.add(room)
        db.commit()
        return room

    return _make


@pytest.fixture
def make_service(db: Session) -> Callable[..., StudioService]:
    def _make(
        studio: Studio,
        name: str = "Mixing",
        price: Decimal = Decimal("50.00"),
        is_active: bool = True,
    ) -> StudioService:
        service = StudioService(
            studio_id=studio.id,
            name=name,
            price=price,
            category="MIXING",
            is_active=is_active,
        )
        db.add(service)
        db.commit()
        return service

    return _make


@pytest.fixture
def make_rule(db: Session) -> Callable[..., AvailabilityRule]:
    def _make(
        studio: Studio,
        day_of_week: int = 1,
        start_time: str = "09:00",
        end_time: str = "17:00",
        is_available: bool = True,
    ) -> AvailabilityRule:
        rule = AvailabilityRule(
            studio_id=studio.id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            is_available=is_available,
        )
        db.add(rule)
        db.commit()
        return rule

    return _make


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    """Insert a booking row directly, bypassing the booking service."""

    def _make(
        studio: Studio,
        client: Client,
        start: datetime,
        end: datetime,
        status: str = "CONFIRMED",
        room_id: Optional[str] = None,
        total_amount: Decimal = Decimal("100.00"),
        deposit_amount: Decimal = Decimal("50.00"),
    ) -> Booking:
        booking = Booking(
            studio_id=studio.id,
            client_id=client.id,
            room_id=room_id,
            start_time=start,
            end_time=end,
            total_amount=total_amount,
            deposit_amount=deposit_amount,
            status=status,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


# HTTP


@pytest.fixture
def api_client(db: Session, fake_gateway: FakePaymentGateway) -> Generator[TestClient, None, None]:
    from studio_booking.main import app

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
