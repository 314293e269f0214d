"""
NoteKeeper Backend: Note Request/Response Schemas
==================================================

What:  Pydantic models defining the notes API contract.
How:   The validator service runs NoteCreate against raw request bodies;
       route handlers use NoteResponse as their response model.

Schemas are separate from SQLAlchemy models so the API controls exactly
which fields are exposed (created_at stays internal).
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    `important` must be a real JSON boolean when present; "true" or 1 are
    rejected rather than coerced. Unknown keys (including a client-sent id)
    are ignored.
    """
    content: StrictStr = Field(min_length=1, description="Note text (required, non-empty)")
    important: StrictBool = Field(default=False, description="Importance flag")

    model_config = {"extra": "ignore"}

    @field_validator("content")
    @classmethod
    def reject_nul(cls, v: str) -> str:
        # PostgreSQL text columns cannot hold U+0000
        if "\x00" in v:
            raise ValueError("must not contain NUL characters")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  JSON representation of a stored note.
    Who:   Returned by every notes endpoint that yields a note.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    content: str = Field(description="Note text")
    important: bool = Field(description="Importance flag")

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Shared Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every failing endpoint.

    Example:
        {
            "error": "`content` is required",
            "code": "validation_error",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
