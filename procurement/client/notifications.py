"""Unread-notification feed with a background poller."""

from __future__ import annotations

import logging
import threading

import requests

from procurement.client.api import ApiError, RateLimitError
from procurement.client.context import ClientContext
from procurement.core.config import settings

logger = logging.getLogger(__name__)

# Where a notification points the user, by type
NOTIFICATION_LINKS = {
    "vendor_approval": "/vendors",
    "vendor_status": "/profile",
    "tender_status": "/procurement/{related_id}",
    "bid_status": "/tenders/{related_id}",
    "technical_score": "/tenders/{related_id}",
    "payment_status": "/payments",
}


def link_for(notification: dict) -> str:
    template = NOTIFICATION_LINKS.get(notification.get("type"))
    if template is None:
        return "#"
    related_id = notification.get("relatedId")
    if "{related_id}" in template and not related_id:
        return "#"
    return template.format(related_id=related_id)


class NotificationFeed:
    """Keeps the signed-in user's newest unread notifications.

    `refresh()` fetches once; `start()` polls every `interval` seconds on a
    daemon thread until `stop()`. A rate-limited fetch yields an empty feed
    rather than an error.
    """

    def __init__(self, context: ClientContext, interval: float | None = None, limit: int = 10):
        self.context = context
        self.interval = interval if interval is not None else settings.notification_poll_seconds
        self.limit = limit
        self._items: list[dict] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def notifications(self) -> list[dict]:
        with self._lock:
            return list(self._items)

    @property
    def unread_count(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def has_badge(self) -> bool:
        return self.unread_count > 0

    def refresh(self) -> list[dict]:
        if self.context.user is None:
            items: list[dict] = []
        else:
            try:
                items = self.context.api.get_notifications(is_read=False, limit=self.limit)
            except RateLimitError:
                logger.warning("Rate limit reached when fetching notifications")
                items = []
        with self._lock:
            self._items = items
        return list(items)

    def mark_read(self, notification_id: str) -> list[dict]:
        """Mark one notification read. On failure the feed is left as it was."""
        try:
            self.context.api.mark_notification_read(notification_id)
        except (ApiError, requests.RequestException):
            logger.exception("Error marking notification %s as read", notification_id)
            return self.notifications
        return self.refresh()

    def mark_all_read(self) -> list[dict]:
        try:
            self.context.api.mark_all_notifications_read()
        except (ApiError, requests.RequestException):
            logger.exception("Error marking all notifications as read")
            return self.notifications
        return self.refresh()

    link_for = staticmethod(link_for)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    @property
    def is_polling(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_polling:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._poll, name="notification-feed", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _poll(self) -> None:
        while not self._stop.is_set():
            try:
                self.refresh()
            except (ApiError, requests.RequestException):
                logger.exception("Error fetching notifications")
            if self._stop.wait(self.interval):
                break

    def __enter__(self) -> "NotificationFeed":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
