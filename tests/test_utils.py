"""Tests for phone normalization, the store gateway and the notifier."""

import httpx
import pytest
from dataclasses import replace

from barbershop.config import load_settings
from barbershop.database import MissingCredentialsError, resolve_database_url
from barbershop.services.notifier import BookingNotification, WebhookNotifier
from barbershop.services.service_crud import segment_for
from barbershop.schemas.service_schema import ServiceSegment
from barbershop.utils.phone import MAX_PHONE_VALUE, normalize_phone


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("0641234567", 641234567),
            ("064 123 4567", 641234567),
            ("+381 64 123-4567", 381641234567),
            ("(011) 222-333", 11222333),
        ],
    )
    def test_digits_only(self, raw, expected):
        assert normalize_phone(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "n/a", "+-()", None])
    def test_nothing_numeric(self, raw):
        assert normalize_phone(raw) is None

    def test_too_long_for_the_column(self):
        assert normalize_phone("1" * 25) is None
        assert normalize_phone(str(MAX_PHONE_VALUE + 1)) is None
        assert normalize_phone("9" * 5000) is None
        assert normalize_phone(str(MAX_PHONE_VALUE)) == MAX_PHONE_VALUE


class TestResolveDatabaseUrl:
    def _settings(self, service=None, restricted=None):
        return replace(load_settings(), database_service_url=service, database_url=restricted)

    def test_prefers_service_credential(self):
        url = resolve_database_url(
            self._settings("postgresql://svc@db/shop", "postgresql://anon@db/shop")
        )
        assert url == "postgresql://svc@db/shop"

    def test_falls_back_to_restricted_credential(self):
        url = resolve_database_url(self._settings(None, "postgresql://anon@db/shop"))
        assert url == "postgresql://anon@db/shop"

    def test_rewrites_legacy_scheme(self):
        url = resolve_database_url(self._settings("postgres://svc@db/shop"))
        assert url == "postgresql://svc@db/shop"

    def test_missing_credentials_fail_fast(self):
        with pytest.raises(MissingCredentialsError, match="DATABASE_SERVICE_URL"):
            resolve_database_url(self._settings())


def _notification(**overrides):
    values = dict(
        reservation_id=7,
        barber_name="Marko",
        customer_name="Petar",
        customer_phone="0641234567",
        date="2025-06-10",
        time="09:00",
        services=["Šišanje", "Brada"],
        total_price=2300,
    )
    values.update(overrides)
    return BookingNotification(**values)


class TestWebhookNotifier:
    def test_payload_keys(self):
        payload = _notification(notes="Kratko sa strane").to_payload()
        assert payload == {
            "reservationId": 7,
            "barberName": "Marko",
            "services": ["Šišanje", "Brada"],
            "totalPrice": 2300,
            "customerName": "Petar",
            "customerPhone": "0641234567",
            "customerEmail": None,
            "date": "2025-06-10",
            "time": "09:00",
            "notes": "Kratko sa strane",
        }

    def test_skips_without_url(self, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("no request expected")

        monkeypatch.setattr(httpx, "post", fail)
        assert WebhookNotifier(None).send(_notification()) is False

    def test_posts_payload(self, monkeypatch):
        calls = []

        def fake_post(url, json=None, timeout=None):
            calls.append((url, json, timeout))
            return httpx.Response(200, request=httpx.Request("POST", url))

        monkeypatch.setattr(httpx, "post", fake_post)
        notifier = WebhookNotifier("https://hooks.example.com/booking", timeout=3)
        assert notifier.send(_notification()) is True
        assert calls[0][0] == "https://hooks.example.com/booking"
        assert calls[0][1]["reservationId"] == 7
        assert calls[0][2] == 3

    def test_connection_error_is_swallowed(self, monkeypatch):
        def fake_post(url, json=None, timeout=None):
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr(httpx, "post", fake_post)
        assert WebhookNotifier("https://hooks.example.com/booking").send(_notification()) is False

    def test_error_status_is_swallowed(self, monkeypatch):
        def fake_post(url, json=None, timeout=None):
            return httpx.Response(502, request=httpx.Request("POST", url))

        monkeypatch.setattr(httpx, "post", fake_post)
        assert WebhookNotifier("https://hooks.example.com/booking").send(_notification()) is False


class TestSegmentFor:
    @pytest.mark.parametrize(
        "name, segment",
        [
            ("Šišanje", ServiceSegment.haircut),
            ("ŠIŠANJE FADE", ServiceSegment.haircut),
            ("Brada", ServiceSegment.beard),
            ("Brijanje", ServiceSegment.beard),
            ("Šišanje + brada", ServiceSegment.combo),
            ("Fade and beard trim", ServiceSegment.combo),
            ("Farbanje", ServiceSegment.other),
        ],
    )
    def test_segments(self, name, segment):
        assert segment_for(name) == segment
