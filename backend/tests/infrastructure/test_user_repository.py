"""User Repository — store-level properties of the four operations.

Invariants:
    - create → get_by_id round-trips the identical record
    - Second create with the same email raises DuplicateEmailError; first row intact
    - get/update/delete on a missing id raise UserNotFoundError
    - update never changes id or created_at
"""

import pytest

from app.core.errors import (
    DuplicateEmailError, StoreUnavailableError, UserNotFoundError,
)
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository


def _snapshot(user) -> tuple:
    return (user.id, user.name, user.email, user.created_at)


async def test_create_then_get_returns_identical_record(repo):
    created = await repo.create("Ada", "ada@x.com")
    fetched = await repo.get_by_id(created.id)
    assert _snapshot(fetched) == _snapshot(created)
    assert created.created_at is not None


async def test_ids_are_assigned_by_store(repo):
    first = await repo.create("Ada", "ada@x.com")
    second = await repo.create("Grace", "grace@x.com")
    assert second.id > first.id


async def test_duplicate_email_raises_and_keeps_first(repo):
    first = await repo.create("Ada", "ada@x.com")
    with pytest.raises(DuplicateEmailError):
        await repo.create("Impostor", "ada@x.com")
    assert _snapshot(await repo.get_by_id(first.id)) == _snapshot(first)


async def test_get_missing_raises_not_found(repo):
    with pytest.raises(UserNotFoundError):
        await repo.get_by_id(12345)


async def test_update_changes_only_name_and_email(repo):
    created = await repo.create("Ada", "ada@x.com")
    updated = await repo.update_by_id(created.id, "Ada King", "king@x.com")
    fetched = await repo.get_by_id(created.id)
    assert (updated.name, updated.email) == ("Ada King", "king@x.com")
    assert _snapshot(fetched) == (
        created.id, "Ada King", "king@x.com", created.created_at,
    )


async def test_update_missing_raises_not_found(repo):
    with pytest.raises(UserNotFoundError):
        await repo.update_by_id(12345, "Ada", "ada@x.com")


async def test_update_to_taken_email_is_atomic(repo):
    await repo.create("Ada", "ada@x.com")
    grace = await repo.create("Grace", "grace@x.com")
    with pytest.raises(DuplicateEmailError):
        await repo.update_by_id(grace.id, "Grace H", "ada@x.com")
    assert _snapshot(await repo.get_by_id(grace.id)) == _snapshot(grace)


async def test_delete_returns_snapshot_then_not_found(repo):
    created = await repo.create("Ada", "ada@x.com")
    deleted = await repo.delete_by_id(created.id)
    assert _snapshot(deleted) == _snapshot(created)
    with pytest.raises(UserNotFoundError):
        await repo.get_by_id(created.id)
    with pytest.raises(UserNotFoundError):
        await repo.delete_by_id(created.id)


async def test_deleted_email_can_be_reused(repo):
    created = await repo.create("Ada", "ada@x.com")
    await repo.delete_by_id(created.id)
    again = await repo.create("Ada", "ada@x.com")
    assert again.id != created.id


async def test_missing_table_surfaces_as_store_unavailable(bare_engine):
    repo = SqlUserRepository(DatabaseSessionManager.from_engine(bare_engine))
    with pytest.raises(StoreUnavailableError) as exc_info:
        await repo.get_by_id(1)
    assert exc_info.value.http_status == 500
    assert exc_info.value.to_response() == {"error": "Internal server error"}
