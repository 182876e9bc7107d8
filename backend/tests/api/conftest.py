"""API test fixtures — FastAPI app driven through httpx's ASGI transport.

Invariants:
    - app.state.db_manager points at the per-test in-memory store
    - Lifespan is not run: no pool is created against PostgreSQL
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.infrastructure.database import DatabaseSessionManager
from app.main import app


@pytest.fixture
async def client(db_manager):
    """FastAPI test client wired to the test store."""
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.state.db_manager = original_manager


@pytest.fixture
async def broken_client(bare_engine):
    """Client whose store has no users table, so every query fails."""
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = DatabaseSessionManager.from_engine(bare_engine)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.state.db_manager = original_manager


@pytest.fixture
async def seed_user(repo):
    """Insert one user directly through the repository."""
    return await repo.create("Ada Lovelace", "ada@x.com")
