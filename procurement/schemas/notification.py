"""Notification Pydantic schemas."""


from datetime import datetime

from pydantic import Field

from procurement.domain.enums import NotificationType
from procurement.schemas.common import CamelModel

class NotificationCreate(CamelModel):
    user: str = Field(min_length=1)
    type: NotificationType
    message: str = Field(min_length=1)
    related_id: str | None = None

class NotificationOut(CamelModel):
    id: str
    user_id: str
    type: str
    message: str
    related_id: str | None = None
    is_read: bool
    created_at: datetime

class UnreadCount(CamelModel):
    count: int
