"""Async engine, session factory, declarative Base and the request-scoped session dependency.

One request gets one session and one transaction: `get_db` commits after the
handler returns and rolls back if anything raised, so a service that writes
several rows (a soft-delete cascade, an insert plus its idempotency key)
either lands completely or not at all.

Routes declare it as `Depends(get_db, scope="function")` so the commit happens
before the response leaves the app. The audit middleware writes through a
second connection, and SQLite would otherwise still hold the request's write
lock at that point.
"""


from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from procurement.core.config import settings

_is_sqlite = settings.database_url.startswith("sqlite")

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
_engine_kwargs: dict = {
    "pool_pre_ping": True,
    "echo": settings.is_development,
}
if _is_sqlite:
    # Sessions hop between the event loop and aiosqlite's worker thread
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_async_engine(settings.database_url, **_engine_kwargs)

if _is_sqlite:

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
        # SQLite ignores REFERENCES clauses unless asked per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# ---------------------------------------------------------------------------
# Declarative Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Every table in procurement.domain derives from this."""

# ---------------------------------------------------------------------------
# Schema bootstrap (Alembic owns migrations; this covers dev and tests)
# ---------------------------------------------------------------------------
async def init_models(reset: bool = False) -> None:
    import procurement.domain  # noqa: F401  register every table on Base.metadata

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
