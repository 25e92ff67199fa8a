"""Tender lifecycle, bid submission rules and evaluation."""

from __future__ import annotations

from conftest import tender_payload


def test_end_to_end_vendor_tender_bid(client, make_user, officer):
    vendor_user = make_user("vendor")
    vendor = client.post(
        "/api/vendors",
        json={
            "name": "Acme MSE",
            "businessType": "MSE",
            "contactPerson": "A. Singh",
            "email": "a@acme.test",
            "phone": "123",
            "address": "X",
        },
        headers=vendor_user["headers"],
    ).json()["data"]
    assert vendor["status"] == "Pending"

    tender = client.post(
        "/api/tenders",
        json={
            "title": "Road Works",
            "description": "...",
            "estimatedValue": 500000,
            "submissionDeadline": "2026-01-01",
            "category": "works",
        },
        headers=officer["headers"],
    ).json()["data"]
    assert tender["status"] == "draft"
    assert tender["isReservedForMSE"] is False
    assert tender["createdBy"]["email"] == officer["email"]

    bid_body = {"tender": tender["id"], "vendor": vendor["id"], "amount": 450000}
    response = client.post("/api/bids", json=bid_body, headers=officer["headers"])
    assert response.status_code == 201
    bid = response.json()["data"]
    assert bid["status"] == "submitted"
    assert bid["tender"]["title"] == "Road Works"
    assert bid["vendor"]["name"] == "Acme MSE"

    response = client.post("/api/bids", json=bid_body, headers=officer["headers"])
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_distinct_pair_is_accepted(client, officer, make_vendor, make_tender):
    _, vendor = make_vendor()
    first, second = make_tender(), make_tender(title="Boiler Spares", category="goods")
    for tender in (first, second):
        response = client.post(
            "/api/bids",
            json={"tender": tender["id"], "vendor": vendor["id"], "amount": 100},
            headers=officer["headers"],
        )
        assert response.status_code == 201

    _, other_vendor = make_vendor()
    response = client.post(
        "/api/bids",
        json={"tender": first["id"], "vendor": other_vendor["id"], "amount": 90},
        headers=officer["headers"],
    )
    assert response.status_code == 201


def test_vendor_bids_as_itself(client, make_vendor, make_tender):
    user, vendor = make_vendor()
    tender = make_tender()
    response = client.post(
        "/api/bids", json={"tender": tender["id"], "amount": 1200, "notes": "Incl. GST"}, headers=user["headers"]
    )
    assert response.status_code == 201
    assert response.json()["data"]["vendorId"] == vendor["id"]


def test_vendor_cannot_bid_for_another_vendor(client, make_vendor, make_tender):
    user, _ = make_vendor()
    _, other = make_vendor()
    tender = make_tender()
    response = client.post(
        "/api/bids",
        json={"tender": tender["id"], "vendor": other["id"], "amount": 10},
        headers=user["headers"],
    )
    assert response.status_code == 403


def test_vendor_without_account_cannot_bid(client, make_user, make_tender):
    user = make_user("vendor")
    tender = make_tender()
    response = client.post("/api/bids", json={"tender": tender["id"], "amount": 10}, headers=user["headers"])
    assert response.status_code == 400


def test_bid_on_missing_tender_is_404(client, make_vendor):
    user, _ = make_vendor()
    response = client.post("/api/bids", json={"tender": "missing", "amount": 10}, headers=user["headers"])
    assert response.status_code == 404


def test_mse_reserved_tender_rejects_large_enterprise(client, make_vendor, make_tender):
    tender = make_tender(isReservedForMSE=True)
    large_user, _ = make_vendor(businessType="Large Enterprise")
    mse_user, _ = make_vendor(businessType="MSE")

    response = client.post("/api/bids", json={"tender": tender["id"], "amount": 10}, headers=large_user["headers"])
    assert response.status_code == 403
    response = client.post("/api/bids", json={"tender": tender["id"], "amount": 10}, headers=mse_user["headers"])
    assert response.status_code == 201


def test_bid_amount_must_be_positive(client, make_vendor, make_tender):
    user, _ = make_vendor()
    tender = make_tender()
    response = client.post("/api/bids", json={"tender": tender["id"], "amount": 0}, headers=user["headers"])
    assert response.status_code == 400
    assert response.json()["error"]["fields"][0]["field"] == "amount"


def test_vendors_see_only_their_own_bids(client, officer, make_vendor, make_tender):
    tender = make_tender()
    first_user, first = make_vendor()
    second_user, second = make_vendor()
    for user in (first_user, second_user):
        client.post("/api/bids", json={"tender": tender["id"], "amount": 10}, headers=user["headers"])

    staff_view = client.get(f"/api/bids/tender/{tender['id']}", headers=officer["headers"]).json()["data"]
    assert len(staff_view) == 2

    vendor_view = client.get(f"/api/bids/tender/{tender['id']}", headers=first_user["headers"]).json()["data"]
    assert [b["vendorId"] for b in vendor_view] == [first["id"]]

    assert client.get(f"/api/bids/vendor/{second['id']}", headers=first_user["headers"]).status_code == 403
    own = client.get(f"/api/bids/vendor/{first['id']}", headers=first_user["headers"]).json()["data"]
    assert len(own) == 1


def test_vendor_revises_own_submitted_bid(client, officer, make_vendor, make_tender):
    user, _ = make_vendor()
    tender = make_tender()
    bid = client.post("/api/bids", json={"tender": tender["id"], "amount": 500}, headers=user["headers"]).json()["data"]

    response = client.put(f"/api/bids/{bid['id']}", json={"amount": 450, "notes": ""}, headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["amount"] == 450
    assert response.json()["data"]["notes"] == ""

    response = client.put(f"/api/bids/{bid['id']}", json={"status": "accepted"}, headers=user["headers"])
    assert response.status_code == 403

    client.put(f"/api/bids/{bid['id']}", json={"status": "under_review"}, headers=officer["headers"])
    response = client.put(f"/api/bids/{bid['id']}", json={"amount": 400}, headers=user["headers"])
    assert response.status_code == 403


def test_other_vendor_cannot_touch_bid(client, make_vendor, make_tender):
    owner, _ = make_vendor()
    intruder, _ = make_vendor()
    tender = make_tender()
    bid = client.post("/api/bids", json={"tender": tender["id"], "amount": 500}, headers=owner["headers"]).json()["data"]

    assert client.get(f"/api/bids/{bid['id']}", headers=intruder["headers"]).status_code == 403
    response = client.put(f"/api/bids/{bid['id']}", json={"amount": 1}, headers=intruder["headers"])
    assert response.status_code == 403


def test_evaluation_stamps_evaluator(client, officer, make_vendor, make_tender):
    user, _ = make_vendor()
    tender = make_tender()
    bid = client.post("/api/bids", json={"tender": tender["id"], "amount": 500}, headers=user["headers"]).json()["data"]
    assert bid["evaluatedAt"] is None

    response = client.put(
        f"/api/bids/{bid['id']}",
        json={"status": "accepted", "technicalScore": 0},
        headers=officer["headers"],
    )
    assert response.status_code == 200
    evaluated = response.json()["data"]
    assert evaluated["status"] == "accepted"
    assert evaluated["technicalScore"] == 0
    assert evaluated["evaluatedById"] == officer["user"]["id"]
    assert evaluated["evaluatedAt"] is not None


def test_technical_score_range(client, officer, make_vendor, make_tender):
    user, _ = make_vendor()
    tender = make_tender()
    bid = client.post("/api/bids", json={"tender": tender["id"], "amount": 500}, headers=user["headers"]).json()["data"]
    response = client.put(f"/api/bids/{bid['id']}", json={"technicalScore": 101}, headers=officer["headers"])
    assert response.status_code == 400


def test_tender_validation(client, officer):
    response = client.post(
        "/api/tenders",
        json=tender_payload(estimatedValue=-5, category="catering", submissionDeadline="soon"),
        headers=officer["headers"],
    )
    assert response.status_code == 400
    fields = {f["field"] for f in response.json()["error"]["fields"]}
    assert fields == {"estimatedValue", "category", "submissionDeadline"}


def test_tender_update_is_partial(client, officer, make_tender):
    tender = make_tender(isReservedForMSE=True)
    response = client.put(
        f"/api/tenders/{tender['id']}", json={"status": "published"}, headers=officer["headers"]
    )
    updated = response.json()["data"]
    assert updated["status"] == "published"
    assert updated["isReservedForMSE"] is True
    assert updated["title"] == tender["title"]

    response = client.put(
        f"/api/tenders/{tender['id']}", json={"isReservedForMSE": False}, headers=officer["headers"]
    )
    assert response.json()["data"]["isReservedForMSE"] is False


def test_tender_list_filters(client, officer, make_tender, make_user):
    make_tender(title="Road Works", category="works")
    make_tender(title="Turbine Oil", category="goods")
    vendor = make_user("vendor")

    response = client.get("/api/tenders", params={"category": "goods"}, headers=vendor["headers"])
    assert [t["title"] for t in response.json()["data"]] == ["Turbine Oil"]

    response = client.get("/api/tenders", params={"search": "road"}, headers=vendor["headers"])
    assert response.json()["meta"]["total"] == 1

    response = client.get(
        "/api/tenders", params={"limit": 1, "page": 2, "sort": "title", "order": "asc"}, headers=vendor["headers"]
    )
    body = response.json()
    assert [t["title"] for t in body["data"]] == ["Turbine Oil"]
    assert body["meta"] == {"total": 2, "page": 2, "limit": 1, "pages": 2}


def test_delete_tender_removes_its_bids(client, officer, make_vendor, make_tender):
    user, _ = make_vendor()
    tender = make_tender()
    bid = client.post("/api/bids", json={"tender": tender["id"], "amount": 500}, headers=user["headers"]).json()["data"]

    response = client.delete(f"/api/tenders/{tender['id']}", headers=officer["headers"])
    assert response.status_code == 204
    assert client.get(f"/api/tenders/{tender['id']}", headers=officer["headers"]).status_code == 404
    assert client.get(f"/api/bids/{bid['id']}", headers=officer["headers"]).status_code == 404
    assert client.get(f"/api/bids/vendor/{bid['vendorId']}", headers=user["headers"]).json()["data"] == []


def test_delete_tender_with_payment_conflicts(client, officer, finance, make_vendor, make_tender):
    _, vendor = make_vendor()
    tender = make_tender()
    client.post(
        "/api/payments",
        json={"vendor": vendor["id"], "amount": 99, "paymentMethod": "bank_transfer", "relatedTender": tender["id"]},
        headers=finance["headers"],
    )
    response = client.delete(f"/api/tenders/{tender['id']}", headers=officer["headers"])
    assert response.status_code == 409


def test_payment_on_a_bid_blocks_tender_delete(client, officer, finance, make_vendor, make_tender):
    user, vendor = make_vendor()
    tender = make_tender()
    bid = client.post("/api/bids", json={"tender": tender["id"], "amount": 500}, headers=user["headers"]).json()["data"]
    response = client.post(
        "/api/payments",
        json={"vendor": vendor["id"], "amount": 500, "paymentMethod": "check", "relatedBid": bid["id"]},
        headers=finance["headers"],
    )
    assert response.status_code == 201

    assert client.delete(f"/api/tenders/{tender['id']}", headers=officer["headers"]).status_code == 409
    assert client.get(f"/api/bids/{bid['id']}", headers=officer["headers"]).status_code == 200


def test_tender_sort_ignores_non_column_names(client, officer, make_tender):
    make_tender(title="Road Works")
    make_tender(title="Turbine Oil", category="goods")
    for sort in ("createdBy", "bids", "nope"):
        response = client.get("/api/tenders", params={"sort": sort}, headers=officer["headers"])
        assert response.status_code == 200, sort
        assert response.json()["meta"]["total"] == 2


def test_staff_bid_requires_vendor(client, officer, make_tender):
    tender = make_tender()
    response = client.post("/api/bids", json={"tender": tender["id"], "amount": 10}, headers=officer["headers"])
    assert response.status_code == 400
    assert response.json()["error"]["fields"] == [{"field": "vendor", "message": "Field required"}]
