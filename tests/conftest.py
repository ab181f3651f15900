"""Shared fixtures: every test gets a fresh app with seed data and order counter at 1."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import database
from main import create_app


@pytest.fixture
def client():
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def clock(monkeypatch):
    """Replace the store clock with one that advances a second per reading."""

    class Clock:
        def __init__(self):
            self.now = datetime.now(timezone.utc).replace(microsecond=500000)

        def __call__(self):
            self.now += timedelta(seconds=1)
            return self.now

    fake = Clock()
    monkeypatch.setattr(database, "utcnow", fake)
    return fake


@pytest.fixture
def sample_order():
    return {
        "scrapType": "Copper",
        "weight": 25,
        "mobile": "9876543210",
        "description": "Old wiring",
        "address": "123 Test Street",
    }
