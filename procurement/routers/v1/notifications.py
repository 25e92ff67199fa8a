"""Notification feed router. Readers only ever see their own notifications."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.auth import get_current_actor, require_admin
from procurement.core.response import DataResponse, ItemsResponse
from procurement.db.base import get_db
from procurement.domain.enums import NotificationType
from procurement.schemas.notification import NotificationCreate, NotificationOut, UnreadCount
from procurement.services.notification import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=ItemsResponse[NotificationOut])
async def list_notifications(
    is_read: Optional[bool] = Query(default=False, alias="isRead"),
    notification_type: Optional[NotificationType] = Query(default=None, alias="type"),
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    """Newest first; unread by default, ?isRead=true for the read ones."""
    items = await NotificationService(session, actor).list_for_viewer(
        is_read=is_read,
        notification_type=notification_type.value if notification_type else None,
        limit=limit,
    )
    return {"data": [NotificationOut.model_validate(n) for n in items]}


@router.get("/unread-count", response_model=DataResponse[UnreadCount])
async def unread_count(
    notification_type: Optional[NotificationType] = Query(default=None, alias="type"),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    count = await NotificationService(session, actor).unread_count(
        notification_type.value if notification_type else None
    )
    return {"data": UnreadCount(count=count)}


@router.put("/read-all", response_model=DataResponse[UnreadCount])
async def mark_all_read(
    notification_type: Optional[NotificationType] = Query(default=None, alias="type"),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    """Returns how many notifications were marked."""
    marked = await NotificationService(session, actor).mark_all_read(
        notification_type.value if notification_type else None
    )
    return {"data": UnreadCount(count=marked)}


@router.put("/{notification_id}/read", response_model=DataResponse[NotificationOut])
async def mark_read(
    notification_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    notification = await NotificationService(session, actor).mark_read(notification_id)
    return {"data": NotificationOut.model_validate(notification)}


@router.post("", response_model=DataResponse[NotificationOut], status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: NotificationCreate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_admin),
):
    notification = await NotificationService(session, actor).create(body)
    return {"data": NotificationOut.model_validate(notification)}
