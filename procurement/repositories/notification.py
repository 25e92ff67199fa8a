from sqlalchemy import update

from procurement.domain.notification import IdempotencyKey, Notification
from procurement.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def mark_all_read(self, user_id: str, notification_type: str | None = None) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
            .where(Notification.deleted_at.is_(None))
        )
        if notification_type:
            stmt = stmt.where(Notification.type == notification_type)
        result = await self._session.execute(
            stmt.values(is_read=True).execution_options(synchronize_session=False)
        )
        await self._session.flush()
        return result.rowcount


class IdempotencyKeyRepository(BaseRepository[IdempotencyKey]):
    model = IdempotencyKey
    conflict_message = "This request is already being processed"

    async def get(self, user_id: str, key: str) -> IdempotencyKey | None:
        items = await self.find(user_id=user_id, key=key, limit=1)
        return items[0] if items else None
