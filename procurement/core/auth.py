"""FastAPI auth dependencies: bearer token -> Actor, and role-set gates."""

from __future__ import annotations

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import ADMIN_ROLES, FINANCE_ROLES, PROCUREMENT_ROLES, Actor
from procurement.core.exceptions import ForbiddenError, UnauthorizedError
from procurement.core.security import decode_access_token
from procurement.db.base import get_db
from procurement.services.user import UserService

# auto_error=False so a missing header goes through our 401 envelope
security = HTTPBearer(auto_error=False)


async def get_current_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> Actor:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    payload = decode_access_token(credentials.credentials)

    actor = await UserService(session).resolve_actor(payload["sub"])
    request.state.user_id = actor.user_id  # picked up by the audit middleware
    return actor


def require_roles(roles):
    """Dependency factory: the actor's role must be a member of `roles`."""

    async def _guard(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not actor.has_role(roles):
            raise ForbiddenError("Your role does not permit this action")
        return actor

    return _guard


require_procurement = require_roles(PROCUREMENT_ROLES)
require_finance = require_roles(FINANCE_ROLES)
require_admin = require_roles(ADMIN_ROLES)


def idempotency_key(
    key: str | None = Header(default=None, alias="Idempotency-Key", max_length=255),
) -> str | None:
    return key.strip() if key and key.strip() else None
