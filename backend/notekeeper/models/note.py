"""
NoteKeeper Backend: Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteStore for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, assigned by the identifier service before insert
    - content: required, non-empty text
    - important: boolean flag, defaults to false
    - created_at: insertion time, the ordering key for listings

    Index on created_at:
        Listing returns notes in insertion order (ORDER BY created_at).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A short text note.

    Lifecycle:
        1. Created through POST /api/notes
        2. Read-only afterwards
        3. Deleted permanently through DELETE /api/notes/{id}
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, immutable once assigned",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note text, never empty",
    )

    important: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Importance flag",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="Insertion time (UTC), orders listings",
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, important={self.important})>"
