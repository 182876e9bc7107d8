"""Request Dependencies — hand the pool-owning manager and the repository to routes.

Invariants:
    - The DatabaseSessionManager comes from app.state, set by the lifespan
    - No module-level pool handle exists; tests override these dependencies
"""

from fastapi import Depends, Request

from app.core.errors import StoreUnavailableError
from app.core.repository_protocols import UserRepository
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository


def get_db_manager(request: Request) -> DatabaseSessionManager:
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise StoreUnavailableError("connect", "Database not initialized")
    return manager


def get_user_repository(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> UserRepository:
    return SqlUserRepository(db)
