"""User registration, login and administration router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor, Role
from procurement.core.auth import get_current_actor, require_admin
from procurement.core.pagination import PaginationParams
from procurement.core.response import DataResponse, ListResponse, paginated
from procurement.db.base import get_db
from procurement.schemas.user import RoleUpdate, TokenOut, UserLogin, UserOut, UserRegister
from procurement.services.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=DataResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister, session: AsyncSession = Depends(get_db, scope="function")):
    """Self-registration always yields a `vendor` role; admins promote staff afterwards."""
    user = await UserService(session).register(body)
    return {"data": UserOut.model_validate(user)}


@router.post("/login", response_model=TokenOut)
async def login(body: UserLogin, session: AsyncSession = Depends(get_db, scope="function")):
    svc = UserService(session)
    token, user = await svc.login(body)
    actor = await svc.resolve_actor(user.id)
    return TokenOut(
        access_token=token,
        user=UserOut.model_validate(user).model_copy(update={"vendor_id": actor.vendor_id}),
    )


@router.get("/me", response_model=DataResponse[UserOut])
async def me(
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    user = await UserService(session).get_user(actor.user_id)
    return {"data": UserOut.model_validate(user).model_copy(update={"vendor_id": actor.vendor_id})}


@router.get("", response_model=ListResponse[UserOut])
async def list_users(
    role: Optional[Role] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_admin),
):
    items, total = await UserService(session).list_users(
        pagination, role=role.value if role else None,
    )
    return paginated(
        [UserOut.model_validate(u) for u in items],
        total, pagination,
    )


@router.put("/{user_id}/role", response_model=DataResponse[UserOut])
async def change_role(
    user_id: str,
    body: RoleUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_admin),
):
    user = await UserService(session).change_role(user_id, body.role)
    return {"data": UserOut.model_validate(user)}
