"""Public catalog reads: services and barbers."""


class TestServices:
    def test_active_services_by_name(self, client):
        response = client.get("/api/services")
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        names = [s["service_name"] for s in body["services"]]
        assert names == ["Brada", "Šišanje", "Šišanje + brada"]

    def test_services_carry_price_and_segment(self, client):
        services = {s["id"]: s for s in client.get("/api/services").json()["services"]}
        assert services[1]["price_rsd"] == 1500
        assert services[1]["duration_minutes"] == 30
        assert services[1]["segment"] == "haircut"
        assert services[2]["segment"] == "beard"
        assert services[3]["segment"] == "combo"
        assert 4 not in services


class TestBarbers:
    def test_active_barbers_by_id(self, client):
        response = client.get("/api/barbers")
        assert response.status_code == 200
        assert response.json()["barbers"] == [
            {"id": 1, "name": "Marko"},
            {"id": 2, "name": "Nikola"},
        ]


class TestRoot:
    def test_home_and_request_id(self, client):
        response = client.get("/", headers={"X-Request-ID": "abc123"})
        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert response.headers["X-Request-ID"] == "abc123"
        assert "X-Process-Time" in response.headers

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {"ok": False, "message": "Not Found"}
