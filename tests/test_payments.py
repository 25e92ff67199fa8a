"""Payments, invoices, payment schedules and idempotent creates."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest


def _future(days: int = 30) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


@pytest.fixture
def vendor(make_vendor):
    return make_vendor()[1]


def _create_payment(client, finance, vendor, /, **overrides) -> dict:
    payload = {"vendor": vendor["id"], "amount": 2500, "paymentMethod": "bank_transfer"}
    payload.update(overrides)
    response = client.post("/api/payments", json=payload, headers=finance["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_new_payment_is_pending(client, finance, vendor):
    payment = _create_payment(client, finance, vendor)
    assert payment["status"] == "pending"
    assert payment["paymentDate"] is None
    assert payment["processedById"] == finance["user"]["id"]
    assert payment["vendor"]["id"] == vendor["id"]


def test_completion_stamps_payment_date(client, finance, vendor):
    payment = _create_payment(client, finance, vendor)

    processing = client.put(
        f"/api/payments/{payment['id']}", json={"status": "processing"}, headers=finance["headers"]
    ).json()["data"]
    assert processing["paymentDate"] is None

    first = client.put(
        f"/api/payments/{payment['id']}", json={"status": "completed"}, headers=finance["headers"]
    ).json()["data"]
    assert first["status"] == "completed"
    assert first["paymentDate"] is not None

    second = client.put(
        f"/api/payments/{payment['id']}",
        json={"status": "completed", "transactionId": "TXN-1"},
        headers=finance["headers"],
    ).json()["data"]
    assert datetime.fromisoformat(second["paymentDate"]) > datetime.fromisoformat(first["paymentDate"])
    assert second["transactionId"] == "TXN-1"


def test_notes_only_update_keeps_status_and_date(client, finance, vendor):
    payment = _create_payment(client, finance, vendor)
    completed = client.put(
        f"/api/payments/{payment['id']}", json={"status": "completed"}, headers=finance["headers"]
    ).json()["data"]
    updated = client.put(
        f"/api/payments/{payment['id']}", json={"notes": "reconciled"}, headers=finance["headers"]
    ).json()["data"]
    assert updated["status"] == "completed"
    assert updated["paymentDate"] == completed["paymentDate"]
    assert updated["notes"] == "reconciled"


def test_payment_routes_need_finance_role(client, officer, vendor):
    response = client.post(
        "/api/payments",
        json={"vendor": vendor["id"], "amount": 1, "paymentMethod": "check"},
        headers=officer["headers"],
    )
    assert response.status_code == 403
    assert client.get("/api/payments", headers=officer["headers"]).status_code == 403


def test_payment_validation(client, finance):
    response = client.post(
        "/api/payments", json={"amount": -1, "paymentMethod": "cash"}, headers=finance["headers"]
    )
    assert response.status_code == 400
    fields = {f["field"] for f in response.json()["error"]["fields"]}
    assert {"amount", "paymentMethod"} <= fields


def test_payment_requires_vendor_or_invoice(client, finance):
    response = client.post(
        "/api/payments", json={"amount": 5, "paymentMethod": "check"}, headers=finance["headers"]
    )
    assert response.status_code == 400


def test_payment_for_unknown_vendor_is_404(client, finance):
    response = client.post(
        "/api/payments",
        json={"vendor": "ghost", "amount": 5, "paymentMethod": "check"},
        headers=finance["headers"],
    )
    assert response.status_code == 404


def test_payment_vendor_derived_from_invoice(client, finance, vendor):
    invoice = client.post(
        "/api/invoices",
        json={
            "vendor": vendor["id"],
            "invoiceNumber": "INV-001",
            "amount": 1000,
            "description": "Cement",
            "dueDate": _future(),
        },
        headers=finance["headers"],
    ).json()["data"]
    assert invoice["status"] == "pending"

    payment = _create_payment(client, finance, vendor, vendor=None, invoice=invoice["id"], amount=1000)
    assert payment["vendorId"] == vendor["id"]
    assert payment["invoice"]["invoiceNumber"] == "INV-001"


def test_duplicate_invoice_number_conflicts(client, finance, vendor):
    body = {
        "vendor": vendor["id"],
        "invoiceNumber": "INV-002",
        "amount": 10,
        "description": "Bolts",
        "dueDate": _future(),
    }
    assert client.post("/api/invoices", json=body, headers=finance["headers"]).status_code == 201
    assert client.post("/api/invoices", json=body, headers=finance["headers"]).status_code == 409


def test_vendor_lists_only_own_payments(client, finance, make_vendor):
    owner, vendor = make_vendor()
    other, _ = make_vendor()
    _create_payment(client, finance, vendor)

    response = client.get(f"/api/payments/vendor/{vendor['id']}", headers=owner["headers"])
    assert response.status_code == 200
    assert len(response.json()["data"]) == 1

    response = client.get(f"/api/payments/vendor/{vendor['id']}", headers=other["headers"])
    assert response.status_code == 403


def test_payment_list_filters(client, finance, vendor):
    first = _create_payment(client, finance, vendor)
    _create_payment(client, finance, vendor)
    client.put(f"/api/payments/{first['id']}", json={"status": "failed"}, headers=finance["headers"])

    response = client.get("/api/payments", params={"status": "failed"}, headers=finance["headers"])
    assert [p["id"] for p in response.json()["data"]] == [first["id"]]
    response = client.get("/api/payments", params={"vendor": vendor["id"]}, headers=finance["headers"])
    assert response.json()["meta"]["total"] == 2


def test_idempotent_payment_replay(client, finance, vendor):
    headers = {**finance["headers"], "Idempotency-Key": "pay-attempt-1"}
    body = {"vendor": vendor["id"], "amount": 300, "paymentMethod": "check"}

    first = client.post("/api/payments", json=body, headers=headers)
    second = client.post("/api/payments", json=body, headers=headers)
    assert first.status_code == second.status_code == 201
    assert first.json()["data"]["id"] == second.json()["data"]["id"]

    listed = client.get("/api/payments", headers=finance["headers"]).json()
    assert listed["meta"]["total"] == 1


def test_idempotency_key_reused_for_other_entity_conflicts(client, finance, vendor):
    headers = {**finance["headers"], "Idempotency-Key": "shared-key"}
    client.post(
        "/api/payments",
        json={"vendor": vendor["id"], "amount": 300, "paymentMethod": "check"},
        headers=headers,
    )
    response = client.post(
        "/api/payment-schedules",
        json={"vendor": vendor["id"], "amount": 50, "scheduleDate": _future(), "frequency": "monthly"},
        headers=headers,
    )
    assert response.status_code == 409


def test_idempotency_keys_are_per_user(client, admin, finance, vendor):
    body = {"vendor": vendor["id"], "amount": 300, "paymentMethod": "check"}
    first = client.post("/api/payments", json=body, headers={**finance["headers"], "Idempotency-Key": "k"})
    second = client.post("/api/payments", json=body, headers={**admin["headers"], "Idempotency-Key": "k"})
    assert first.json()["data"]["id"] != second.json()["data"]["id"]


def test_schedules_listed_soonest_first(client, finance, vendor):
    for days, description in ((90, "Q3"), (10, "Next week"), (40, "Next month")):
        response = client.post(
            "/api/payment-schedules",
            json={
                "vendor": vendor["id"],
                "amount": 100,
                "scheduleDate": _future(days),
                "frequency": "one_time",
                "description": description,
            },
            headers=finance["headers"],
        )
        assert response.status_code == 201
        assert response.json()["data"]["status"] == "active"

    schedules = client.get("/api/payment-schedules", headers=finance["headers"]).json()["data"]
    assert [s["description"] for s in schedules] == ["Next week", "Next month", "Q3"]


def test_schedule_status_update(client, finance, vendor):
    schedule = client.post(
        "/api/payment-schedules",
        json={"vendor": vendor["id"], "amount": 100, "scheduleDate": _future(), "frequency": "weekly"},
        headers=finance["headers"],
    ).json()["data"]
    response = client.put(
        f"/api/payment-schedules/{schedule['id']}", json={"status": "paused"}, headers=finance["headers"]
    )
    assert response.json()["data"]["status"] == "paused"
    assert response.json()["data"]["frequency"] == "weekly"

    response = client.put(
        f"/api/payment-schedules/{schedule['id']}", json={"status": None}, headers=finance["headers"]
    )
    assert response.status_code == 400
