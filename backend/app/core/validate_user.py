"""User Payload Validation — renders the first validation failure as a client message.

Invariants:
    - Pure functions: no IO, no logging, deterministic
    - Exactly one message per failed request (first error wins, name before email)
    - Messages quote the offending field: '"name" is required'
    - Path ids outside the store's identity range map to UserNotFoundError, never 400/500

Design Decisions:
    - Pydantic performs the checks (schemas/user.py); this module only turns its
      error dicts into the wire message so the rules live in one place
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from app.core.errors import ErrorContext, PayloadValidationError, UserNotFoundError

# SERIAL column: 32-bit signed identity, assigned from 1
MAX_USER_ID = 2_147_483_647
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

_DIGITS_RE = re.compile(r"^[0-9]+$")

_OBJECT_ERROR_TYPES = frozenset({"model_type", "model_attributes_type", "dict_type"})


def _field_of(loc: Sequence[Any]) -> str | None:
    """Strip the FastAPI 'body' prefix; None when the error targets the whole body."""
    parts = [p for p in loc if p != "body"]
    if not parts or not isinstance(parts[0], str):
        return None
    return parts[0]


def describe_error(error: Mapping[str, Any]) -> tuple[str, str]:
    """Map a single pydantic error dict to (field, message)."""
    err_type = error.get("type", "")
    field = _field_of(error.get("loc", ()))

    if err_type == "json_invalid":
        return "value", "Invalid JSON body"
    if field is None:
        if err_type == "missing":
            return "value", '"value" is required'
        if err_type in _OBJECT_ERROR_TYPES:
            return "value", '"value" must be of type object'
        return "value", '"value" is invalid'

    label = f'"{field}"'
    if err_type == "extra_forbidden":
        return field, f"{label} is not allowed"
    if err_type == "missing":
        return field, f"{label} is required"
    if error.get("input") == "":
        return field, f"{label} is not allowed to be empty"
    if err_type == "string_type":
        return field, f"{label} must be a string"
    if err_type == "string_too_short":
        limit = error.get("ctx", {}).get("min_length", NAME_MIN_LENGTH)
        return field, f"{label} length must be at least {limit} characters long"
    if err_type == "string_too_long":
        limit = error.get("ctx", {}).get("max_length", NAME_MAX_LENGTH)
        return field, (
            f"{label} length must be less than or equal to {limit} characters long"
        )
    if field == "email":
        return field, f"{label} must be a valid email"
    return field, f"{label} is invalid"


def first_validation_error(errors: Sequence[Mapping[str, Any]]) -> PayloadValidationError:
    """Build the PayloadValidationError for the first reported failure."""
    if not errors:
        return PayloadValidationError('"value" is invalid', "value")
    field, message = describe_error(errors[0])
    return PayloadValidationError(message, field)


def parse_user_id(raw: str) -> int:
    """Parse a path id; anything that cannot name a stored row is not found."""
    if not _DIGITS_RE.match(raw):
        raise UserNotFoundError(ErrorContext(debug_info={"raw_id": raw}))
    user_id = int(raw)
    if user_id < 1 or user_id > MAX_USER_ID:
        raise UserNotFoundError(ErrorContext(debug_info={"raw_id": raw}))
    return user_id
