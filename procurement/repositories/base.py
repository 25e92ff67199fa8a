"""Generic async repository with soft-delete, pagination, and search."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, Sequence, TypeVar

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.exceptions import ConflictError
from procurement.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository.

    Soft-deletes: rows with `deleted_at IS NOT NULL` are excluded from all
    standard reads. Hard-delete is intentionally never exposed.
    Unique-constraint violations surface as ConflictError.
    """

    model: type[ModelT]
    search_columns: ClassVar[Sequence[str]] = ()
    conflict_message: ClassVar[str] = "Record conflicts with an existing one"

    def __init__(self, session: AsyncSession):
        self._session = session

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self):
        """Return a SELECT excluding soft-deleted rows."""
        q = select(self.model)
        if hasattr(self.model, "deleted_at"):
            q = q.where(self.model.deleted_at.is_(None))
        return q

    def _apply_filters(self, q, filters: dict[str, Any] | None, search: str | None):
        if filters:
            for col_name, value in filters.items():
                if value is not None and hasattr(self.model, col_name):
                    q = q.where(getattr(self.model, col_name) == value)
        if search and self.search_columns:
            pattern = f"%{search.lower()}%"
            q = q.where(or_(*(
                func.lower(getattr(self.model, col)).like(pattern) for col in self.search_columns
            )))
        return q

    def _column(self, name: str):
        return self.model.__table__.c.get(name)

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(self.conflict_message) from exc

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            self._base_query()
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
        order: str = "desc",
        filters: dict[str, Any] | None = None,
        search: str | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return (items, total_count) with pagination and optional column filters."""
        q = self._apply_filters(self._base_query(), filters, search)

        # Count
        count_q = select(func.count()).select_from(q.subquery())
        total = (await self._session.execute(count_q)).scalar_one()

        # Order + paginate; only real columns are sortable
        col = self._column(order_by)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())
        q = q.offset(offset).limit(limit)

        items = (await self._session.execute(q)).scalars().all()
        return list(items), total

    async def find(
        self,
        *,
        order_by: str = "created_at",
        order: str = "desc",
        limit: int | None = None,
        **filters: Any,
    ) -> list[ModelT]:
        """Unpaginated equality lookup, e.g. `find(tender_id=...)`."""
        q = self._apply_filters(self._base_query(), filters, None)
        col = self._column(order_by)
        q = q.order_by(col.desc() if order == "desc" else col.asc())
        if limit is not None:
            q = q.limit(limit)
        return list((await self._session.execute(q)).scalars().all())

    async def find_between(
        self,
        col_name: str,
        start: datetime | None = None,
        end: datetime | None = None,
        *,
        order: str = "desc",
        **filters: Any,
    ) -> list[ModelT]:
        """Equality filters plus a half-open `[start, end)` range on one column, ordered by it."""
        col = self._column(col_name)
        q = self._apply_filters(self._base_query(), filters, None)
        if start is not None:
            q = q.where(col >= start)
        if end is not None:
            q = q.where(col < end)
        q = q.order_by(col.desc() if order == "desc" else col.asc())
        return list((await self._session.execute(q)).scalars().all())

    async def find_in(self, col_name: str, values: Sequence[str]) -> list[ModelT]:
        if not values:
            return []
        q = (
            self._base_query()
            .where(self._column(col_name).in_(values))
            .order_by(self.model.created_at.desc())
        )
        return list((await self._session.execute(q)).scalars().all())

    async def count_by(self, col_name: str) -> dict[str, int]:
        """Live row counts grouped by one column's value."""
        col = self._column(col_name)
        q = select(col, func.count()).select_from(self.model).group_by(col)
        if hasattr(self.model, "deleted_at"):
            q = q.where(self.model.deleted_at.is_(None))
        return {value: count for value, count in (await self._session.execute(q)).all()}

    async def sum_of(self, col_name: str) -> float:
        q = select(func.coalesce(func.sum(self._column(col_name)), 0)).select_from(self.model)
        if hasattr(self.model, "deleted_at"):
            q = q.where(self.model.deleted_at.is_(None))
        return float((await self._session.execute(q)).scalar_one())

    async def exists(self, **filters: Any) -> bool:
        q = self._apply_filters(self._base_query(), filters, None).limit(1)
        return (await self._session.execute(q)).scalars().first() is not None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(**kwargs)
        self._session.add(instance)
        await self._flush()  # populate id, surface unique violations
        return await self.get_by_id(instance.id)  # type: ignore[return-value]

    async def update(self, instance: ModelT, **kwargs: Any) -> ModelT:
        """Overwrite exactly the given attributes; anything not passed is untouched."""
        kwargs.pop("id", None)
        for field, value in kwargs.items():
            setattr(instance, field, value)
        await self._flush()
        return await self.get_by_id(instance.id)  # type: ignore[return-value]

    async def soft_delete(self, entity_id: str) -> bool:
        result = await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        await self._session.flush()
        return result.rowcount > 0

    async def soft_delete_where(self, **filters: Any) -> int:
        """Soft-delete every live row matching the equality filters; returns the count."""
        stmt = update(self.model).where(self.model.deleted_at.is_(None))
        for col_name, value in filters.items():
            stmt = stmt.where(getattr(self.model, col_name) == value)
        result = await self._session.execute(
            stmt.values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        await self._session.flush()
        return result.rowcount
