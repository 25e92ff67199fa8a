"""Idempotency keys for create operations.

A client sends the same `Idempotency-Key` for every attempt of one logical
submission. The first attempt stores (user, key) -> created entity id in the
same transaction as the insert; later attempts get that entity back instead of
a second row.
"""


from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.exceptions import ConflictError
from procurement.repositories.notification import IdempotencyKeyRepository

class IdempotencyService:
    def __init__(self, session: AsyncSession, user_id: str):
        self._repo = IdempotencyKeyRepository(session)
        self._user_id = user_id

    async def replay(self, key: str | None, scope: str) -> str | None:
        """Return the entity id created earlier under this key, if any."""
        if not key:
            return None
        record = await self._repo.get(self._user_id, key)
        if record is None:
            return None
        if record.scope != scope:
            raise ConflictError(f"Idempotency key was already used for a {record.scope}")
        return record.entity_id

    async def remember(self, key: str | None, scope: str, entity_id: str) -> None:
        if key:
            await self._repo.create(
                user_id=self._user_id, key=key, scope=scope, entity_id=entity_id
            )
