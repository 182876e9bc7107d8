"""Root conftest — shared test configuration and in-memory store fixtures.

Invariants:
    - Tests never reach a real PostgreSQL server
    - Every test gets a fresh in-memory SQLite database with the users table
    - db_manager wraps the test engine exactly as production wraps the pool
"""

import os

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    # StaticPool: one shared connection, otherwise each checkout sees an empty DB
    engine = create_async_engine(
        TEST_DATABASE_URL, echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
async def repo(db_manager):
    return SqlUserRepository(db_manager)


@pytest.fixture
async def bare_engine():
    """Engine whose database has no users table (schema init never ran)."""
    engine = create_async_engine(
        TEST_DATABASE_URL, echo=False, poolclass=StaticPool,
    )
    yield engine
    await engine.dispose()
