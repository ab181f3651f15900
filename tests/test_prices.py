"""Market price endpoints."""
import pytest


def test_list_prices_seeded(client):
    resp = client.get("/api/prices")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["count"] == 7
    assert "lastUpdated" in data
    assert all(p["unit"] == "kg" for p in data["prices"])


def test_list_prices_sorted_by_price_desc(client):
    prices = client.get("/api/prices").json()["prices"]
    assert [p["scrapType"] for p in prices] == [
        "Copper", "Brass", "Aluminum", "Steel", "Iron", "Plastic", "Paper",
    ]


def test_upsert_updates_case_insensitively(client):
    resp = client.post("/api/prices", json={"scrapType": "copper", "price": 700})
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Price updated for copper"
    assert data["updatedPrice"]["id"] == 1
    assert data["updatedPrice"]["scrapType"] == "Copper"
    assert data["updatedPrice"]["price"] == 700
    listing = client.get("/api/prices").json()
    assert listing["count"] == 7
    copper = [p for p in listing["prices"] if p["scrapType"].lower() == "copper"]
    assert len(copper) == 1
    assert copper[0]["price"] == 700


def test_upsert_adds_new_type(client):
    resp = client.post("/api/prices", json={"scrapType": "E-Waste", "price": "45.5"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "New price added for E-Waste"
    assert data["updatedPrice"] == {
        "id": 8,
        "scrapType": "E-Waste",
        "price": 45.5,
        "unit": "kg",
        "lastUpdated": data["updatedPrice"]["lastUpdated"],
    }
    assert client.get("/api/prices").json()["count"] == 8


def test_upsert_then_update_new_type(client):
    client.post("/api/prices", json={"scrapType": "Glass", "price": 3})
    client.post("/api/prices", json={"scrapType": "GLASS", "price": 4})
    assert client.get("/api/prices").json()["count"] == 8


def test_upsert_missing_fields(client):
    resp = client.post("/api/prices", json={"scrapType": "Iron"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: scrapType, price"


@pytest.mark.parametrize("price", [-10, "abc", "0", "inf"])
def test_upsert_invalid_price(client, price):
    resp = client.post("/api/prices", json={"scrapType": "Iron", "price": price})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Price must be a positive number"
    iron = [p for p in client.get("/api/prices").json()["prices"] if p["scrapType"] == "Iron"]
    assert iron[0]["price"] == 30


def test_upsert_boolean_price_rejected(client):
    resp = client.post("/api/prices", json={"scrapType": "Iron", "price": True})
    assert resp.status_code == 400
    iron = [p for p in client.get("/api/prices").json()["prices"] if p["scrapType"] == "Iron"]
    assert iron[0]["price"] == 30


def test_upsert_without_body(client):
    resp = client.post("/api/prices")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: scrapType, price"
