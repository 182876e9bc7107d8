"""User ORM — the single persisted entity.

Invariants:
    - id is an auto-incrementing integer primary key, never reused after delete
    - email is unique and non-null; uniqueness enforced by the store
    - created_at assigned by the store (server default), never written by the service
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """Row of the users table."""
    __tablename__ = "users"
    # SQLite reuses rowids without AUTOINCREMENT
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r})"
