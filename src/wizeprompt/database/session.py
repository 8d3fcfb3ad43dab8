from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from wizeprompt.config import get_settings
from wizeprompt.database.base import Base

settings = get_settings()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an AsyncEngine; SQLite URLs get foreign-key enforcement switched on."""
    kwargs = {"echo": echo, "future": True}
    if not url.startswith("sqlite"):
        kwargs["pool_pre_ping"] = True  # Enables connection health checks
    async_engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_foreign_keys(async_engine.sync_engine)
    return async_engine


def enable_sqlite_foreign_keys(sync_engine: Engine) -> None:
    # SQLite ignores ON DELETE CASCADE unless the pragma is set per connection.
    @event.listens_for(sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def make_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.SQLALCHEMY_ECHO)

AsyncSessionMaker = make_sessionmaker(engine)


async def create_all(bind: AsyncEngine = engine) -> None:
    """Create every table registered on Base.metadata (development / tests)."""
    import wizeprompt.models  # noqa: F401  registers the mappers

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Dependency to get DB session
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Yields a session and ensures it's closed after the request.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_async_session)):
            await db.execute(...)
    """
    async with AsyncSessionMaker() as session:
        yield session
