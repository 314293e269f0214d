"""
NoteKeeper Backend: Payload Validator
======================================

What:  Pure functions that check a decoded JSON body against the field
       constraints of a note, a user registration, or a login.
How:   Runs the Pydantic request schema and converts the first field error
       into a ValidationError that names the offending field.
Who:   Called by NoteService and UserService before any store access.

No side effects: nothing here touches the database or the request.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from notekeeper.exceptions import ValidationError
from notekeeper.schemas.note import NoteCreate
from notekeeper.schemas.user import LoginRequest, UserCreate

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _describe(error: dict) -> ValidationError:
    """Turn one Pydantic error entry into our ValidationError."""
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None

    if field is None:
        return ValidationError(message=error.get("msg", "Validation failed"))

    if error.get("type") == "missing":
        message = f"`{field}` is required"
    else:
        message = f"`{field}`: {error.get('msg', 'is invalid')}"

    return ValidationError(
        message=message,
        field=field,
        context={"type": error.get("type")},
    )


def _validate(schema: Type[SchemaT], payload: Any) -> SchemaT:
    if not isinstance(payload, dict):
        raise ValidationError(message="request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        errors = e.errors()
        raise _describe(errors[0]) from None


def validate_note_payload(payload: Any) -> NoteCreate:
    """
    Check a candidate note.

    Rules:
        content:   required, string, at least one character
        important: optional JSON boolean, defaults to False

    Raises:
        ValidationError: naming `content` or `important`
    """
    return _validate(NoteCreate, payload)


def validate_user_payload(payload: Any) -> UserCreate:
    """
    Check a candidate user registration.

    Rules:
        username: required, at least 3 characters
        name:     required, non-empty
        password: required, at least 3 characters, at most 72 bytes

    Raises:
        ValidationError: naming the first offending field
    """
    return _validate(UserCreate, payload)


def validate_login_payload(payload: Any) -> LoginRequest:
    """Check that a login body carries string username and password."""
    return _validate(LoginRequest, payload)
