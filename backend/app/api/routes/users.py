"""User Routes — CRUD over the users resource.

Invariants:
    - Body validation (create/update) runs before any store access
    - Exactly one repository call per request
    - Routes never see SQLAlchemy errors; domain errors are rendered by
      api/error_handlers.py
"""

from fastapi import APIRouter, Depends, status

from app.core.repository_protocols import UserRepository
from app.core.validate_user import parse_user_id
from app.api.dependencies import get_user_repository
from app.schemas.user import DeleteResponse, UserPayload, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserPayload,
    repo: UserRepository = Depends(get_user_repository),
):
    """Create a user; the store assigns id and created_at."""
    user = await repo.create(body.name, body.email)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str, repo: UserRepository = Depends(get_user_repository),
):
    user = await repo.get_by_id(parse_user_id(user_id))
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserPayload,
    repo: UserRepository = Depends(get_user_repository),
):
    """Replace name and email; id and created_at are untouched."""
    user = await repo.update_by_id(parse_user_id(user_id), body.name, body.email)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(
    user_id: str, repo: UserRepository = Depends(get_user_repository),
):
    await repo.delete_by_id(parse_user_id(user_id))
    return DeleteResponse()
