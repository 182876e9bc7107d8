"""User Repository — one parameterized statement per operation against the users table.

Invariants:
    - Values are always bound parameters (SQLAlchemy constructs, never string SQL)
    - Each call uses its own pooled session and commits exactly once
    - update/delete/get on a missing id raise UserNotFoundError
    - id and created_at are never written by this module
"""

import logging

from sqlalchemy import delete, insert, select, update

from app.core.errors import ErrorContext, UserNotFoundError
from app.infrastructure.database import DatabaseSessionManager
from app.models.user import User

logger = logging.getLogger(__name__)


class SqlUserRepository:
    """UserRepository backed by a DatabaseSessionManager."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def create(self, name: str, email: str) -> User:
        stmt = insert(User).returning(User)
        async with self._db.session("create") as session:
            user = (
                await session.scalars(stmt, [{"name": name, "email": email}])
            ).one()
            await session.commit()
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def get_by_id(self, user_id: int) -> User:
        stmt = select(User).where(User.id == user_id)
        async with self._db.session("get", user_id) as session:
            user = (await session.execute(stmt)).scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(ErrorContext(user_id=user_id, operation="get"))
        return user

    async def update_by_id(self, user_id: int, name: str, email: str) -> User:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(name=name, email=email)
            .returning(User)
        )
        async with self._db.session("update", user_id) as session:
            user = (await session.execute(stmt)).scalar_one_or_none()
            await session.commit()
        if user is None:
            raise UserNotFoundError(ErrorContext(user_id=user_id, operation="update"))
        logger.info("User updated", extra={"user_id": user_id})
        return user

    async def delete_by_id(self, user_id: int) -> User:
        stmt = delete(User).where(User.id == user_id).returning(User)
        async with self._db.session("delete", user_id) as session:
            user = (await session.execute(stmt)).scalar_one_or_none()
            await session.commit()
        if user is None:
            raise UserNotFoundError(ErrorContext(user_id=user_id, operation="delete"))
        logger.info("User deleted", extra={"user_id": user_id})
        return user
