"""
Core pytest configuration for the entire test suite.

Only the essentials live here: logging installation, a per-test in-memory
database and the session bound to it. Domain fixtures (repositories, seeded
rows, HTTP client) are in tests/test_fixtures/ and imported at the bottom.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "httpx",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from pytest import FixtureRequest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from wizeprompt.core.logging.builder import setup_logging
from wizeprompt.database.base import Base
from wizeprompt.database.session import enable_sqlite_foreign_keys, make_sessionmaker
import wizeprompt.models  # noqa: F401  registers every table on Base.metadata

from .test_fixtures.settings import make_test_settings

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install the application's dictConfig once for the session, then re-attach
    pytest's capture handler so `caplog` keeps working.
    """
    setup_logging(make_test_settings())

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None:
        logging.getLogger().addHandler(handler)

    yield


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive, so every session bound to
    this engine sees the same database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine.sync_engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_sessionmaker(async_engine)


@pytest.fixture()
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    base_repo,
    user_repository,
    conversation_repository,
    message_repository,
    tag_repository,
    model_repository,
    provider_repository,
    provider,
    models,
    created_user,
    other_user,
    tags,
    create_conversation,
)
from .test_fixtures.api_fixtures import app, client  # noqa: E402,F401
