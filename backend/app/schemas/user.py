"""User Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserPayload.name: 2-100 chars, must be a JSON string
    - UserPayload.email: a bare address accepted by email-validator; display-name
      forms ("Ada <ada@x.com>") are rejected, never unwrapped
    - Unknown keys are rejected
    - Same payload shape for create and update (no partial updates)
"""

from datetime import datetime
from typing import Annotated

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictStr

from app.core.validate_user import NAME_MAX_LENGTH, NAME_MIN_LENGTH


def check_email_address(value: str) -> str:
    """Validate the raw string; the stored address is the domain-normalised input."""
    result = validate_email(value, check_deliverability=False)
    # normalisation only touches the domain; anything else means value was not bare
    if result.normalized.casefold() != value.casefold():
        raise ValueError("value is not a bare email address")
    return result.normalized


EmailAddress = Annotated[StrictStr, AfterValidator(check_email_address)]


class UserPayload(BaseModel):
    """Create/update body; both fields required."""
    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailAddress


class UserResponse(BaseModel):
    """Stored user record as returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime


class DeleteResponse(BaseModel):
    message: str = "User deleted successfully"


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: datetime
