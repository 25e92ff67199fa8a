"""Shared fixtures: a fresh SQLite database per test and helpers for users, vendors and tenders.

Environment variables must be set before the application is imported, since
settings and the engine are built at import time.
"""

from __future__ import annotations

import os
import tempfile
import uuid
from pathlib import Path

import pytest

_DB_DIR = Path(tempfile.mkdtemp(prefix="procurement-tests-"))

ADMIN_EMAIL = "admin@neepco.test"
ADMIN_PASSWORD = "admin-secret"

os.environ.update(
    {
        "APP_ENV": "test",
        "DATABASE_URL": f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}",
        "DB_RESET_ON_STARTUP": "true",
        "JWT_SECRET": "test-secret",
        "BOOTSTRAP_ADMIN_EMAIL": ADMIN_EMAIL,
        "BOOTSTRAP_ADMIN_PASSWORD": ADMIN_PASSWORD,
    }
)

from fastapi.testclient import TestClient  # noqa: E402

from procurement.main import app  # noqa: E402


@pytest.fixture
def client():
    # Startup drops and recreates every table, so each test sees an empty database
    with TestClient(app) as test_client:
        yield test_client


def login(client, email: str, password: str) -> dict:
    response = client.post("/api/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return {
        "token": body["accessToken"],
        "user": body["user"],
        "email": email,
        "password": password,
        "headers": {"Authorization": f"Bearer {body['accessToken']}"},
    }


@pytest.fixture
def admin(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def make_user(client, admin):
    """Register a user, promote it to `role` through the admin, and log in."""

    def _make(role: str = "vendor", password: str = "secret123") -> dict:
        email = f"{role}-{uuid.uuid4().hex[:8]}@neepco.test"
        response = client.post(
            "/api/users/register",
            json={"email": email, "password": password, "fullName": role.replace("_", " ").title()},
        )
        assert response.status_code == 201, response.text
        if role != "vendor":
            user_id = response.json()["data"]["id"]
            response = client.put(
                f"/api/users/{user_id}/role", json={"role": role}, headers=admin["headers"]
            )
            assert response.status_code == 200, response.text
        return login(client, email, password)

    return _make


def vendor_payload(**overrides) -> dict:
    payload = {
        "name": "Acme MSE",
        "businessType": "MSE",
        "contactPerson": "A. Singh",
        "email": f"vendor-{uuid.uuid4().hex[:8]}@acme.test",
        "phone": "123",
        "address": "X",
    }
    payload.update(overrides)
    return payload


def tender_payload(**overrides) -> dict:
    payload = {
        "title": "Road Works",
        "description": "Resurfacing of the plant access road",
        "estimatedValue": 500000,
        "submissionDeadline": "2026-01-01",
        "category": "works",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_vendor(client, make_user):
    """Create a vendor-role user with its vendor record; returns (user, vendor)."""

    def _make(**overrides) -> tuple[dict, dict]:
        user = make_user("vendor")
        response = client.post("/api/vendors", json=vendor_payload(**overrides), headers=user["headers"])
        assert response.status_code == 201, response.text
        return user, response.json()["data"]

    return _make


@pytest.fixture
def officer(make_user):
    return make_user("procurement_officer")


@pytest.fixture
def finance(make_user):
    return make_user("finance_officer")


@pytest.fixture
def make_tender(client, officer):
    def _make(**overrides) -> dict:
        response = client.post("/api/tenders", json=tender_payload(**overrides), headers=officer["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make
