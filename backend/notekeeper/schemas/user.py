"""
NoteKeeper Backend: User Request/Response Schemas
==================================================

What:  Pydantic models for registration, listing and login.

Security:
    UserResponse has no password fields at all, so neither the plaintext
    nor the hash can leak through serialization.
"""

import uuid

from pydantic import BaseModel, Field, StrictStr, field_validator

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 3

# bcrypt only looks at the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72


class UserCreate(BaseModel):
    """Body of POST /api/users."""
    username: StrictStr = Field(min_length=USERNAME_MIN_LENGTH, max_length=255)
    name: StrictStr = Field(min_length=1, max_length=255)
    password: StrictStr = Field(min_length=PASSWORD_MIN_LENGTH)

    model_config = {"extra": "ignore"}

    @field_validator("username", "name", "password")
    @classmethod
    def reject_nul(cls, v: str) -> str:
        # Neither PostgreSQL text nor bcrypt accepts U+0000
        if "\x00" in v:
            raise ValueError("must not contain NUL characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"must be at most {PASSWORD_MAX_BYTES} bytes")
        return v


class UserResponse(BaseModel):
    """JSON representation of a user."""
    id: uuid.UUID
    username: str
    name: str

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: StrictStr
    password: StrictStr

    model_config = {"extra": "ignore"}


class LoginResponse(BaseModel):
    """Successful login: a signed bearer token plus who it belongs to."""
    token: str
    username: str
    name: str
