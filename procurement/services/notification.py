"""Notification feed service. Every read and write is scoped to the viewer."""


from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.exceptions import NotFoundError
from procurement.domain.notification import Notification
from procurement.repositories.notification import NotificationRepository
from procurement.repositories.user import UserRepository
from procurement.schemas.notification import NotificationCreate

class NotificationService:
    def __init__(self, session: AsyncSession, actor: Actor):
        self._actor = actor
        self._repo = NotificationRepository(session)
        self._users = UserRepository(session)

    async def list_for_viewer(
        self,
        is_read: bool | None = False,
        notification_type: str | None = None,
        limit: int = 10,
    ) -> list[Notification]:
        return await self._repo.find(
            limit=limit,
            user_id=self._actor.user_id,
            is_read=is_read,
            type=notification_type,
        )

    async def unread_count(self, notification_type: str | None = None) -> int:
        _, total = await self._repo.list(
            limit=1,
            filters={"user_id": self._actor.user_id, "is_read": False, "type": notification_type},
        )
        return total

    async def mark_read(self, notification_id: str) -> Notification:
        notification = await self._repo.get_by_id(notification_id)
        # Someone else's notification is reported as missing, not forbidden
        if not notification or notification.user_id != self._actor.user_id:
            raise NotFoundError("Notification", notification_id)
        return await self._repo.update(notification, is_read=True)

    async def mark_all_read(self, notification_type: str | None = None) -> int:
        return await self._repo.mark_all_read(self._actor.user_id, notification_type)

    async def create(self, data: NotificationCreate) -> Notification:
        if not await self._users.exists(id=data.user):
            raise NotFoundError("User", data.user)
        return await self._repo.create(
            user_id=data.user,
            type=data.type.value,
            message=data.message,
            related_id=data.related_id,
        )
