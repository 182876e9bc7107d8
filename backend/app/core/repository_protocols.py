"""Boundary Protocols — contracts between the HTTP layer and the store.

Invariants:
    - Routes depend on UserRepository, never on SQLAlchemy types
    - Every method is one atomic statement; failures surface only as
      UserNotFoundError, DuplicateEmailError or StoreUnavailableError

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
"""

from datetime import datetime
from typing import Protocol


class UserLike(Protocol):
    """Structural contract for a stored user record."""
    id: int
    name: str
    email: str
    created_at: datetime


class UserRepository(Protocol):
    """Contract for user persistence, implemented by infrastructure."""
    async def create(self, name: str, email: str) -> UserLike: ...
    async def get_by_id(self, user_id: int) -> UserLike: ...
    async def update_by_id(self, user_id: int, name: str, email: str) -> UserLike: ...
    async def delete_by_id(self, user_id: int) -> UserLike: ...
