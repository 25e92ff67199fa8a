"""Authentication, role gates and the error envelope."""

from __future__ import annotations

from sqlalchemy import select

from conftest import ADMIN_EMAIL, login, tender_payload
from procurement.db.base import async_session_factory
from procurement.domain.audit import AuditTrail
from procurement.middleware.audit import entity_from_path


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_yields_vendor_role(client):
    response = client.post(
        "/api/users/register",
        json={"email": "New.User@neepco.test", "password": "secret123", "fullName": "New User"},
    )
    assert response.status_code == 201
    user = response.json()["data"]
    assert user["role"] == "vendor"
    assert user["email"] == "new.user@neepco.test"
    assert "hashedPassword" not in user


def test_register_duplicate_email_conflicts(client):
    body = {"email": "dup@neepco.test", "password": "secret123"}
    assert client.post("/api/users/register", json=body).status_code == 201
    response = client.post("/api/users/register", json=body)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_login_and_me(client, admin):
    response = client.get("/api/users/me", headers=admin["headers"])
    assert response.status_code == 200
    me = response.json()["data"]
    assert me["email"] == ADMIN_EMAIL
    assert me["role"] == "admin"
    assert me["vendorId"] is None


def test_login_wrong_password(client, admin):
    response = client.post("/api/users/login", json={"email": ADMIN_EMAIL, "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_missing_token_is_401(client):
    response = client.get("/api/vendors")
    assert response.status_code == 401
    assert response.json() == {
        "error": {"code": "UNAUTHORIZED", "message": "Authentication required"}
    }


def test_garbage_token_is_401(client):
    response = client.get("/api/tenders", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_vendor_cannot_create_tender(client, make_user):
    vendor = make_user("vendor")
    response = client.post("/api/tenders", json=tender_payload(), headers=vendor["headers"])
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_finance_officer_cannot_create_tender(client, finance):
    response = client.post("/api/tenders", json=tender_payload(), headers=finance["headers"])
    assert response.status_code == 403


def test_admin_passes_procurement_gate(client, admin):
    response = client.post("/api/tenders", json=tender_payload(), headers=admin["headers"])
    assert response.status_code == 201


def test_only_admin_lists_users(client, admin, officer):
    assert client.get("/api/users", headers=officer["headers"]).status_code == 403
    response = client.get("/api/users", params={"role": "procurement_officer"}, headers=admin["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["email"] == officer["email"]


def test_role_change_takes_effect_on_next_request(client, admin, make_user):
    user = make_user("vendor")
    assert client.post("/api/tenders", json=tender_payload(), headers=user["headers"]).status_code == 403

    client.put(
        f"/api/users/{user['user']['id']}/role",
        json={"role": "procurement_officer"},
        headers=admin["headers"],
    )
    # Same token: the role is read from the database, not the token claims
    assert client.post("/api/tenders", json=tender_payload(), headers=user["headers"]).status_code == 201


def test_validation_error_lists_every_field(client):
    response = client.post("/api/users/register", json={"email": "not-an-email", "password": "123"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {f["field"] for f in error["fields"]} == {"email", "password"}


def test_unknown_route_is_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_login_returns_vendor_id_once_vendor_exists(client, make_vendor):
    user, vendor = make_vendor()
    again = login(client, user["email"], user["password"])
    assert again["user"]["vendorId"] == vendor["id"]


def test_write_requests_are_audited(client, admin):
    client.post("/api/tenders", json=tender_payload(), headers=admin["headers"])
    client.get("/api/tenders", headers=admin["headers"])

    async def _rows():
        async with async_session_factory() as session:
            result = await session.execute(select(AuditTrail).where(AuditTrail.path == "/api/tenders"))
            return result.scalars().all()

    # Run on the app's event loop, where the engine's connections live
    rows = client.portal.call(_rows)
    assert [(r.method, r.status_code, r.entity_type) for r in rows] == [("POST", 201, "tender")]
    assert rows[0].user_id == admin["user"]["id"]


def test_every_write_in_a_sequence_is_audited(client, admin):
    tender = client.post("/api/tenders", json=tender_payload(), headers=admin["headers"]).json()["data"]
    path = f"/api/tenders/{tender['id']}"
    assert client.put(path, json={"status": "published"}, headers=admin["headers"]).status_code == 200
    assert client.delete(path, headers=admin["headers"]).status_code == 204

    async def _rows():
        async with async_session_factory() as session:
            result = await session.execute(
                select(AuditTrail).where(AuditTrail.entity_type == "tender").order_by(AuditTrail.created_at)
            )
            return result.scalars().all()

    rows = client.portal.call(_rows)
    assert [(r.method, r.status_code) for r in rows] == [("POST", 201), ("PUT", 200), ("DELETE", 204)]
    assert [r.entity_id for r in rows[1:]] == [tender["id"], tender["id"]]


def test_entity_from_path():
    bid_id = "0" * 36
    assert entity_from_path(f"/api/bids/{bid_id}") == ("bid", bid_id)
    assert entity_from_path("/api/payment-schedules") == ("payment-schedule", None)
    assert entity_from_path("/") == ("unknown", None)
