"""Audit middleware: records every state-changing request to audit_trail."""


import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from procurement.core.config import settings
from procurement.db.base import async_session_factory
from procurement.domain.audit import AuditTrail

logger = logging.getLogger(__name__)

_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
_ID_LENGTH = 36


def entity_from_path(path: str) -> tuple[str, str | None]:
    """`/api/payment-schedules/<uuid>` -> ("payment-schedule", "<uuid>")."""
    parts = [p for p in path.strip("/").split("/") if p and p != "api"]
    if not parts:
        return "unknown", None
    entity_id = next((p for p in parts[1:] if len(p) == _ID_LENGTH), None)
    return parts[0].removesuffix("s"), entity_id


class AuditMiddleware(BaseHTTPMiddleware):
    """Writes one audit row per write request once the handler has produced its response.

    The row goes through its own session, so it is kept even when the
    request's transaction rolled back. A failed audit write is logged and
    never turned into an error for the caller.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if settings.audit_enabled and request.method in _WRITE_METHODS:
            await self._record(request, response.status_code, duration_ms)
        return response

    async def _record(self, request: Request, status_code: int, duration_ms: int) -> None:
        entity_type, entity_id = entity_from_path(request.url.path)
        try:
            async with async_session_factory() as session:
                session.add(
                    AuditTrail(
                        # Set by get_current_actor; absent for public routes
                        user_id=getattr(request.state, "user_id", None),
                        ip_address=request.client.host if request.client else None,
                        user_agent=request.headers.get("user-agent"),
                        method=request.method,
                        path=request.url.path,
                        status_code=status_code,
                        duration_ms=duration_ms,
                        entity_type=entity_type,
                        entity_id=entity_id,
                    )
                )
                await session.commit()
        except Exception:
            logger.exception("Audit write failed for %s %s", request.method, request.url.path)
