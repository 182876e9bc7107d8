"""Database Session Manager — async connection pool with error mapping and health checks.

Invariants:
    - Every session is closed in a finally block, whatever the outcome
    - Every session auto-rolls-back on a store exception (no partial commits leak)
    - Raw SQLAlchemy/driver errors never leave this module: uniqueness violations
      become DuplicateEmailError, everything else StoreUnavailableError
    - Pool is bounded (pool_size, no overflow); checkout waits at most pool_timeout

Design Decisions:
    - Manager is built in the FastAPI lifespan and stored on app.state; routes
      reach it through api/dependencies.py
    - Uniqueness detection is a per-dialect capability check (_UNIQUE_VIOLATION_CHECKS)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

import app.models  # noqa: F401  (populates Base.metadata)
from app.core.errors import DuplicateEmailError, ErrorContext, StoreUnavailableError
from app.db.base import Base

logger = logging.getLogger(__name__)

_PG_UNIQUE_VIOLATION = "23505"


def _pg_unique_violation(orig: BaseException) -> bool:
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is None and orig.__cause__ is not None:
        # asyncpg adapter keeps the driver exception as __cause__
        code = getattr(orig.__cause__, "sqlstate", None)
    return code == _PG_UNIQUE_VIOLATION


def _sqlite_unique_violation(orig: BaseException) -> bool:
    return "UNIQUE constraint failed" in str(orig)


_UNIQUE_VIOLATION_CHECKS: dict[str, Callable[[BaseException], bool]] = {
    "postgresql": _pg_unique_violation,
    "sqlite": _sqlite_unique_violation,
}


def is_unique_violation(exc: IntegrityError, dialect_name: str) -> bool:
    """Does this integrity failure come from a unique constraint?"""
    check = _UNIQUE_VIOLATION_CHECKS.get(dialect_name)
    if check is None or exc.orig is None:
        return False
    return check(exc.orig)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        pool_timeout: float = 2.0,
        pool_recycle: float = 30.0,
        connect_args: dict | None = None,
    ):
        engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
            connect_args=connect_args or {},
        )
        self._bind(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an already configured engine (tests, scripts)."""
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.dialect_name = engine.dialect.name
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(
        self, operation: str = "query", user_id: int | None = None,
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session; store failures are re-raised as domain errors."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            ctx = ErrorContext(user_id=user_id, operation=operation)
            if is_unique_violation(e, self.dialect_name):
                logger.info(
                    f"Unique constraint violated during {operation}",
                    extra={"operation": operation, "user_id": user_id},
                )
                raise DuplicateEmailError(ctx) from e
            logger.error(f"DB integrity error during {operation}: {e}")
            raise StoreUnavailableError(operation, str(e.orig), ctx) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error during {operation}: {e}")
            raise StoreUnavailableError(
                operation, str(e), ErrorContext(user_id=user_id),
            ) from e
        except OSError as e:
            # connection refused, socket missing, connect timeout
            logger.error(f"DB connection error during {operation}: {e}")
            raise StoreUnavailableError(
                operation, str(e), ErrorContext(user_id=user_id),
            ) from e
        finally:
            await session.close()

    async def init_schema(self) -> None:
        """Create the users table if it does not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except StoreUnavailableError as e:
            logger.error(f"DB health check failed: {e.context.debug_info}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
