"""Thin HTTP client for the procurement API, used by the forms and the notification feed.

Any requests-compatible session works (`requests.Session`, or FastAPI's
`TestClient` in tests): the client only calls `session.request(...)` and reads
`status_code` / `json()` from the response.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


class ApiError(Exception):
    """Non-2xx response, carrying the server's error envelope."""

    def __init__(self, status_code: int, message: str, code: str = "ERROR", fields: list | None = None):
        self.status_code = status_code
        self.code = code
        self.message = message
        self.fields = fields or []
        super().__init__(f"{status_code} {code}: {message}")


class RateLimitError(ApiError):
    """HTTP 429 from the API or anything in front of it."""


class ApiClient:
    def __init__(
        self,
        base_url: str = "",
        token: str | None = None,
        session: Any = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, idempotency_key: str | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
        idempotency_key: str | None = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params=params or None,
            headers=self._headers(idempotency_key),
            timeout=self.timeout,
        )
        if response.status_code == 204:
            return None
        try:
            body = response.json()
        except ValueError:
            body = {}
        if 200 <= response.status_code < 300:
            return body

        error = body.get("error", {}) if isinstance(body, dict) else {}
        exc_cls = RateLimitError if response.status_code == 429 else ApiError
        raise exc_cls(
            response.status_code,
            error.get("message") or f"Request failed with status {response.status_code}",
            code=error.get("code", "ERROR"),
            fields=error.get("fields"),
        )

    def get(self, path: str, **params: Any) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: dict, idempotency_key: str | None = None) -> Any:
        return self.request("POST", path, json=payload, idempotency_key=idempotency_key)

    def put(self, path: str, payload: dict | None = None) -> Any:
        return self.request("PUT", path, json=payload or {})

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> dict:
        """Exchange credentials for a token; the token is kept for later calls."""
        body = self.post("/api/users/login", {"email": email, "password": password})
        self.token = body["accessToken"]
        return body["user"]

    # ------------------------------------------------------------------
    # Invoices / payments / schedules
    # ------------------------------------------------------------------

    def create_invoice(self, payload: dict, idempotency_key: str | None = None) -> dict:
        return self.post("/api/invoices", payload, idempotency_key)["data"]

    def list_invoices(self, status: str | None = None, vendor: str | None = None) -> list[dict]:
        return self.get("/api/invoices", status=status, vendor=vendor)["data"]

    def process_payment(self, payload: dict, idempotency_key: str | None = None) -> dict:
        return self.post("/api/payments", payload, idempotency_key)["data"]

    def list_payments(self, status: str | None = None, vendor: str | None = None) -> list[dict]:
        return self.get("/api/payments", status=status, vendor=vendor)["data"]

    def get_payment(self, payment_id: str) -> dict:
        return self.get(f"/api/payments/{payment_id}")["data"]

    def update_payment_status(self, payment_id: str, status: str) -> dict:
        return self.put(f"/api/payments/{payment_id}", {"status": status})["data"]

    def create_payment_schedule(self, payload: dict, idempotency_key: str | None = None) -> dict:
        return self.post("/api/payment-schedules", payload, idempotency_key)["data"]

    def list_payment_schedules(self, status: str | None = None, vendor: str | None = None) -> list[dict]:
        return self.get("/api/payment-schedules", status=status, vendor=vendor)["data"]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def get_notifications(
        self, is_read: bool = False, limit: int = 10, type: str | None = None
    ) -> list[dict]:
        return self.get(
            "/api/notifications", isRead=str(is_read).lower(), limit=limit, type=type
        )["data"]

    def mark_notification_read(self, notification_id: str) -> dict:
        return self.put(f"/api/notifications/{notification_id}/read")["data"]

    def mark_all_notifications_read(self, type: str | None = None) -> int:
        body = self.request("PUT", "/api/notifications/read-all", json={}, params={"type": type})
        return body["data"]["count"]

    def unread_notification_count(self, type: str | None = None) -> int:
        return self.get("/api/notifications/unread-count", type=type)["data"]["count"]

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def procurement_report(
        self, start_date: str | None = None, end_date: str | None = None, status: str | None = None
    ) -> list[dict]:
        return self.get(
            "/api/reports/procurement", startDate=start_date, endDate=end_date, status=status
        )["data"]

    def vendor_report(self, business_type: str | None = None, status: str | None = None) -> list[dict]:
        return self.get("/api/reports/vendors", businessType=business_type, status=status)["data"]

    def payment_report(
        self, start_date: str | None = None, end_date: str | None = None, status: str | None = None
    ) -> list[dict]:
        return self.get(
            "/api/reports/payments", startDate=start_date, endDate=end_date, status=status
        )["data"]

    def dashboard_metrics(self) -> dict:
        return self.get("/api/reports/dashboard")["data"]
