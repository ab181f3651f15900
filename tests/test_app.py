"""Root, health, routing fallbacks and error rendering."""
from fastapi.testclient import TestClient

from database import OrderStore
from main import create_app


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Scrap Connect API", "version": "1.0.0", "status": "running"}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "OK"
    assert data["message"] == "Scrap Connect API is running!"
    assert "timestamp" in data
    assert data["uptime"] >= 0


def test_unknown_route(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Route GET /api/nothing-here not found"}


def test_unsupported_method_is_unknown_route(client):
    resp = client.delete("/api/prices")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Route DELETE /api/prices not found"}


def test_wrongly_typed_field(client):
    resp = client.post("/api/auth/login", json={"mobile": ["9876543210"], "password": "x"})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid request body")


def test_unexpected_error_is_500(monkeypatch):
    def explode(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(OrderStore, "list_all", explode)
    with TestClient(create_app(), raise_server_exceptions=False) as c:
        resp = c.get("/api/orders")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}


def test_apps_do_not_share_state():
    with TestClient(create_app()) as first, TestClient(create_app()) as second:
        first.post("/api/orders", json={"scrapType": "Iron", "weight": 5, "mobile": "9876543210"})
        assert second.get("/api/orders").json()["count"] == 0
        resp = second.post(
            "/api/orders", json={"scrapType": "Iron", "weight": 5, "mobile": "9876543210"}
        )
        assert resp.json()["order"]["orderId"] == "SC000001"


def test_cors_preflight(client):
    resp = client.options(
        "/api/orders",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"
