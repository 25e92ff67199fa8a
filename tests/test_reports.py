"""Procurement, vendor and payment reports and dashboard metrics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest


def _utc_today():
    return datetime.now(timezone.utc).date()


def _bid(client, user, tender, amount=1000):
    response = client.post("/api/bids", json={"tender": tender["id"], "amount": amount}, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _payment(client, finance, vendor, amount, **extra):
    response = client.post(
        "/api/payments",
        json={"vendor": vendor["id"], "amount": amount, "paymentMethod": "bank_transfer", **extra},
        headers=finance["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.parametrize(
    "path", ["/api/reports/procurement", "/api/reports/vendors", "/api/reports/payments", "/api/reports/dashboard"]
)
def test_reports_require_procurement_role(client, finance, make_user, path):
    assert client.get(path).status_code == 401
    assert client.get(path, headers=finance["headers"]).status_code == 403
    assert client.get(path, headers=make_user("vendor")["headers"]).status_code == 403


def test_procurement_report_embeds_bids(client, officer, make_vendor, make_tender):
    user, vendor = make_vendor(name="Acme MSE")
    road = make_tender(title="Road Works")
    make_tender(title="Turbine Oil", category="goods")
    _bid(client, user, road, amount=4200)

    response = client.get("/api/reports/procurement", headers=officer["headers"])
    assert response.status_code == 200
    rows = response.json()["data"]
    assert [t["title"] for t in rows] == ["Turbine Oil", "Road Works"]
    assert rows[0]["bids"] == []
    [bid] = rows[1]["bids"]
    assert bid["amount"] == 4200
    assert bid["status"] == "submitted"
    assert bid["vendor"] == {"name": "Acme MSE", "businessType": "MSE"}


def test_procurement_report_filters(client, officer, make_tender):
    draft = make_tender(title="Road Works")
    make_tender(title="Turbine Oil", category="goods")
    client.put(f"/api/tenders/{draft['id']}", json={"status": "published"}, headers=officer["headers"])

    rows = client.get(
        "/api/reports/procurement", params={"status": "published"}, headers=officer["headers"]
    ).json()["data"]
    assert [t["title"] for t in rows] == ["Road Works"]

    today = _utc_today()
    tomorrow = (today + timedelta(days=1)).isoformat()
    yesterday = (today - timedelta(days=1)).isoformat()
    params = {"startDate": yesterday, "endDate": tomorrow}
    assert len(client.get("/api/reports/procurement", params=params, headers=officer["headers"]).json()["data"]) == 2
    params = {"startDate": tomorrow}
    assert client.get("/api/reports/procurement", params=params, headers=officer["headers"]).json()["data"] == []


def test_inverted_date_range_is_400(client, officer):
    response = client.get(
        "/api/reports/payments",
        params={"startDate": "2026-03-01", "endDate": "2026-02-01"},
        headers=officer["headers"],
    )
    assert response.status_code == 400
    assert response.json()["error"]["fields"][0]["field"] == "startDate"


def test_vendor_report_filters_and_embeds_bids(client, officer, make_vendor, make_tender):
    user, mse = make_vendor(name="Acme MSE", businessType="MSE")
    make_vendor(name="Bharat Heavy", businessType="Large Enterprise")
    tender = make_tender(title="Road Works")
    _bid(client, user, tender)

    rows = client.get(
        "/api/reports/vendors", params={"businessType": "MSE"}, headers=officer["headers"]
    ).json()["data"]
    assert [v["name"] for v in rows] == ["Acme MSE"]
    assert rows[0]["bids"][0]["tender"] == {"title": "Road Works", "status": "draft"}

    rows = client.get("/api/reports/vendors", params={"status": "Active"}, headers=officer["headers"]).json()["data"]
    assert rows == []


def test_payment_report_uses_payment_date(client, officer, finance, make_vendor):
    _, vendor = make_vendor()
    done = _payment(client, finance, vendor, 300)
    _payment(client, finance, vendor, 50)
    client.put(f"/api/payments/{done['id']}", json={"status": "completed"}, headers=finance["headers"])

    rows = client.get("/api/reports/payments", headers=officer["headers"]).json()["data"]
    assert len(rows) == 2
    assert rows[0]["id"] == done["id"]

    today = _utc_today().isoformat()
    rows = client.get(
        "/api/reports/payments", params={"startDate": today, "endDate": today}, headers=officer["headers"]
    ).json()["data"]
    assert [p["id"] for p in rows] == [done["id"]]
    assert rows[0]["vendor"]["name"] == vendor["name"]

    rows = client.get("/api/reports/payments", params={"status": "pending"}, headers=officer["headers"]).json()["data"]
    assert [p["amount"] for p in rows] == [50]


def test_dashboard_metrics(client, officer, finance, make_vendor, make_tender):
    _, mse = make_vendor(businessType="MSE")
    make_vendor(businessType="Large Enterprise")
    client.put(f"/api/vendors/{mse['id']}", json={"status": "Active"}, headers=officer["headers"])

    published = make_tender(title="Road Works")
    make_tender(title="Turbine Oil", category="goods")
    client.put(f"/api/tenders/{published['id']}", json={"status": "published"}, headers=officer["headers"])

    paid = _payment(client, finance, mse, 250.5)
    _payment(client, finance, mse, 100)
    client.put(f"/api/payments/{paid['id']}", json={"status": "completed"}, headers=finance["headers"])

    response = client.get("/api/reports/dashboard", headers=officer["headers"])
    assert response.status_code == 200
    assert response.json()["data"] == {
        "tenders": {"total": 2, "published": 1, "underReview": 0, "awarded": 0},
        "vendors": {"total": 2, "mse": 1, "active": 1},
        "payments": {"total": 350.5, "completed": 1, "pending": 1},
    }


def test_deleted_rows_leave_the_reports(client, admin, officer, make_vendor, make_tender):
    _, vendor = make_vendor()
    tender = make_tender()
    client.delete(f"/api/tenders/{tender['id']}", headers=officer["headers"])
    client.delete(f"/api/vendors/{vendor['id']}", headers=admin["headers"])

    assert client.get("/api/reports/procurement", headers=officer["headers"]).json()["data"] == []
    assert client.get("/api/reports/vendors", headers=officer["headers"]).json()["data"] == []
    metrics = client.get("/api/reports/dashboard", headers=officer["headers"]).json()["data"]
    assert metrics["tenders"]["total"] == 0
    assert metrics["vendors"]["total"] == 0
