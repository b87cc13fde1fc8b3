"""Admin calendar: availability overrides and the schedule view."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from barbershop.models.availability_model import BarberAvailability
from barbershop.services.availability_crud import availability_crud
from conftest import add_override, add_reservation

TZ = ZoneInfo("Europe/Belgrade")


def local(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)


def override_rows(db, barber_id: int = 1):
    db.expire_all()
    return (
        db.query(BarberAvailability)
        .filter(BarberAvailability.barber_id == barber_id)
        .order_by(BarberAvailability.date)
        .all()
    )


class TestMarkUnavailable:
    def test_repeat_calls_keep_one_row(self, admin_client, db):
        payload = {"barberId": 1, "dates": ["2025-06-11"]}
        first = admin_client.post("/api/admin/availability/unavailable", json=payload)
        second = admin_client.post("/api/admin/availability/unavailable", json=payload)
        assert first.status_code == 200
        assert first.json() == {"ok": True, "message": "Dostupnost sačuvana!", "affected": 1}
        assert second.status_code == 200

        rows = override_rows(db)
        assert len(rows) == 1
        assert rows[0].date == date(2025, 6, 11)
        assert rows[0].is_available is False

    def test_duplicate_dates_in_one_call(self, admin_client, db):
        payload = {"barberId": 1, "dates": ["2025-06-12", "2025-06-11", "2025-06-12"]}
        response = admin_client.post("/api/admin/availability/unavailable", json=payload)
        assert response.json()["affected"] == 2
        assert [r.date for r in override_rows(db)] == [date(2025, 6, 11), date(2025, 6, 12)]

    def test_existing_available_row_is_flipped(self, admin_client, db):
        add_override(db, 1, date(2025, 6, 11), is_available=True)
        admin_client.post(
            "/api/admin/availability/unavailable",
            json={"barberId": 1, "dates": ["2025-06-11"], "workingHoursStart": "10:00"},
        )
        rows = override_rows(db)
        assert len(rows) == 1
        assert rows[0].is_available is False
        assert rows[0].working_hours_start.hour == 10

    def test_public_slots_disappear(self, admin_client):
        admin_client.post(
            "/api/admin/availability/unavailable", json={"barberId": 1, "dates": ["2025-06-11"]}
        )
        body = admin_client.get("/api/booking-availability/slots?barberId=1&date=2025-06-11").json()
        assert body["slots"] == []

    def test_validation(self, admin_client):
        response = admin_client.post(
            "/api/admin/availability/unavailable", json={"barberId": 1, "dates": []}
        )
        assert response.status_code == 400
        response = admin_client.post(
            "/api/admin/availability/unavailable",
            json={
                "barberId": 1,
                "dates": ["2025-06-11"],
                "workingHoursStart": "17:00",
                "workingHoursEnd": "09:00",
            },
        )
        assert response.status_code == 400

    def test_unknown_barber(self, admin_client):
        response = admin_client.post(
            "/api/admin/availability/unavailable", json={"barberId": 42, "dates": ["2025-06-11"]}
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Barber not found"


class TestMarkAvailable:
    def test_revert_deletes_the_row(self, admin_client, db):
        admin_client.post(
            "/api/admin/availability/unavailable", json={"barberId": 1, "dates": ["2025-06-11"]}
        )
        response = admin_client.post(
            "/api/admin/availability/available", json={"barberId": 1, "dates": ["2025-06-11"]}
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True, "message": "Dostupnost obrisana!", "affected": 1}
        assert override_rows(db) == []

    def test_nothing_to_revert(self, admin_client):
        response = admin_client.post(
            "/api/admin/availability/available", json={"barberId": 1, "dates": ["2025-06-11"]}
        )
        assert response.status_code == 200
        assert response.json()["affected"] == 0

    def test_only_named_barber_is_touched(self, admin_client, db):
        add_override(db, 1, date(2025, 6, 11))
        add_override(db, 2, date(2025, 6, 11))
        admin_client.post(
            "/api/admin/availability/available", json={"barberId": 1, "dates": ["2025-06-11"]}
        )
        assert override_rows(db, 1) == []
        assert len(override_rows(db, 2)) == 1


class TestSaveWeek:
    def test_week_toggles(self, admin_client, db):
        add_override(db, 1, date(2025, 6, 10))
        response = admin_client.put(
            "/api/admin/availability/week",
            json={
                "barberId": 1,
                "days": {
                    "2025-06-09": True,
                    "2025-06-10": True,
                    "2025-06-11": False,
                    "2025-06-12": False,
                    "2025-06-13": True,
                },
            },
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Dostupnost sačuvana!"
        assert response.json()["affected"] == 3
        assert [r.date for r in override_rows(db)] == [date(2025, 6, 11), date(2025, 6, 12)]

    def test_empty_week_rejected(self, admin_client):
        response = admin_client.put("/api/admin/availability/week", json={"barberId": 1, "days": {}})
        assert response.status_code == 400


class TestListAvailability:
    def test_rows_in_range(self, admin_client, db):
        add_override(db, 1, date(2025, 6, 11))
        add_override(db, 1, date(2025, 7, 1))
        response = admin_client.get(
            "/api/admin/availability?barberId=1&startDate=2025-06-09&endDate=2025-06-15"
        )
        assert response.status_code == 200
        rows = response.json()["availability"]
        assert len(rows) == 1
        assert rows[0]["barber_id"] == 1
        assert rows[0]["date"] == "2025-06-11"
        assert rows[0]["working_hours_start"] == "09:00:00"


class TestSchedule:
    def _seed(self, db):
        add_reservation(db, 1, local(date(2025, 6, 10), 11), local(date(2025, 6, 10), 11, 30), name="Ana")
        add_reservation(db, 1, local(date(2025, 6, 10), 9), local(date(2025, 6, 10), 9, 30), name="Ivan")
        add_reservation(db, 2, local(date(2025, 6, 12), 15), local(date(2025, 6, 12), 16), name="Jovan", service_id=3)
        add_reservation(db, 1, local(date(2025, 6, 17), 9), local(date(2025, 6, 17), 9, 30), name="Later")

    def test_day_view_defaults_to_today(self, admin_client, db):
        self._seed(db)
        response = admin_client.get("/api/admin/schedule")
        assert response.status_code == 200
        body = response.json()
        assert body["view"] == "day"
        assert body["date"] == "2025-06-09"
        assert body["barber"] == "all"
        assert len(body["days"]) == 1
        assert body["days"][0]["reservations"] == []
        assert [b["name"] for b in body["barbers"]] == ["Marko", "Nikola"]

    def test_day_view_orders_by_start(self, admin_client, db):
        self._seed(db)
        body = admin_client.get("/api/admin/schedule?date=2025-06-10").json()
        reservations = body["days"][0]["reservations"]
        assert [r["customer_name"] for r in reservations] == ["Ivan", "Ana"]
        assert reservations[0]["local_start"] == "09:00"
        assert reservations[0]["local_end"] == "09:30"
        assert reservations[0]["service_names"] == ["Šišanje"]

    def test_week_view_starts_monday(self, admin_client, db):
        self._seed(db)
        body = admin_client.get("/api/admin/schedule?date=2025-06-12&view=week").json()
        assert [d["date"] for d in body["days"]][0] == "2025-06-09"
        assert len(body["days"]) == 7
        counts = {d["date"]: len(d["reservations"]) for d in body["days"]}
        assert counts["2025-06-10"] == 2
        assert counts["2025-06-12"] == 1
        assert sum(counts.values()) == 3

    def test_single_barber(self, admin_client, db):
        self._seed(db)
        body = admin_client.get("/api/admin/schedule?date=2025-06-12&view=week&barber=2").json()
        assert body["barber"] == "2"
        assert [b["id"] for b in body["barbers"]] == [2]
        names = [r["customer_name"] for d in body["days"] for r in d["reservations"]]
        assert names == ["Jovan"]

    def test_bad_barber_filter(self, admin_client):
        assert admin_client.get("/api/admin/schedule?barber=marko").status_code == 400
        assert admin_client.get("/api/admin/schedule?barber=42").status_code == 404

    def test_bad_view(self, admin_client):
        assert admin_client.get("/api/admin/schedule?view=month").status_code == 400


class TestAvailabilityCrud:
    def test_save_week_counts(self, seeded):
        marked, cleared = availability_crud.save_week(
            seeded, 2, {date(2025, 6, 9): False, date(2025, 6, 10): True}
        )
        assert (marked, cleared) == (1, 0)
        assert availability_crud.get_override(seeded, 2, date(2025, 6, 9)).is_available is False

    def test_overrides_by_date(self, seeded):
        availability_crud.mark_unavailable(seeded, 1, [date(2025, 6, 11), date(2025, 6, 13)])
        by_date = availability_crud.overrides_by_date(seeded, 1, date(2025, 6, 9), date(2025, 6, 12))
        assert list(by_date) == [date(2025, 6, 11)]
