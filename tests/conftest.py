"""Shared test fixtures: in-memory store, frozen clock, recording notifier."""

from dataclasses import replace
from datetime import date, datetime, time, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from barbershop.config import get_settings, load_settings
from barbershop.database import create_schema, get_db
from barbershop.main import app
from barbershop.models.availability_model import BarberAvailability
from barbershop.models.barber_model import Barber
from barbershop.models.reservation_model import Reservation
from barbershop.models.service_model import Service
from barbershop.services.notifier import WebhookNotifier, get_notifier
from barbershop.utils.clock import get_now

# Monday 2025-06-09, 10:00 in Belgrade
FROZEN_NOW = datetime(2025, 6, 9, 8, 0, tzinfo=timezone.utc)


class RecordingNotifier(WebhookNotifier):
    def __init__(self):
        super().__init__(url=None)
        self.sent = []

    def send(self, notification) -> bool:
        self.sent.append(notification)
        return True


@pytest.fixture
def settings():
    return replace(
        load_settings(),
        database_service_url=None,
        database_url=None,
        shop_timezone="Europe/Belgrade",
        opening_time=time(9, 0),
        closing_time=time(17, 0),
        slot_minutes=30,
        lead_time_minutes=120,
        booking_window_days=5,
        admin_password="1234",
        admin_salt="admin-secret-salt",
        admin_cookie_name="admin_auth",
        environment="test",
        notify_webhook_url=None,
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    """Two working barbers, one retired, and a small service list."""
    db.add_all(
        [
            Barber(id=1, name="Marko", active=True),
            Barber(id=2, name="Nikola", active=True),
            Barber(id=3, name="Stefan", active=False),
            Service(id=1, service_name="Šišanje", price_rsd=1500, duration_minutes=30),
            Service(id=2, service_name="Brada", price_rsd=800, duration_minutes=30),
            Service(id=3, service_name="Šišanje + brada", price_rsd=2000, duration_minutes=60),
            Service(id=4, service_name="Farbanje", price_rsd=3000, duration_minutes=60, active=False),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(session_factory, seeded, settings, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FROZEN_NOW
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    response = client.post("/api/admin/auth", json={"password": "1234"})
    assert response.status_code == 200
    return client


def add_reservation(
    db,
    barber_id: int,
    start: datetime,
    end: datetime,
    name: str = "Petar",
    phone: str = "0641234567",
    service_id: int = 1,
) -> Reservation:
    reservation = Reservation(
        barber_id=barber_id,
        service_id=service_id,
        service_ids=[service_id],
        customer_name=name,
        customer_phone=phone,
        start_time=start,
        end_time=end,
    )
    db.add(reservation)
    db.commit()
    return reservation


def add_override(db, barber_id: int, day: date, is_available: bool = False) -> BarberAvailability:
    row = BarberAvailability(barber_id=barber_id, date=day, is_available=is_available)
    db.add(row)
    db.commit()
    return row


def booking_payload(
    start: str,
    end: str,
    barber_id: int = 1,
    name: str = "Petar Petrović",
    phone: str = "064 123 4567",
    email: Optional[str] = "petar@example.com",
    **extra,
) -> dict:
    payload = {
        "barberId": barber_id,
        "serviceIds": [1],
        "customerName": name,
        "customerPhone": phone,
        "customerEmail": email,
        "startTime": start,
        "endTime": end,
    }
    payload.update(extra)
    return payload
