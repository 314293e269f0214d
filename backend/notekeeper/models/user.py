"""
NoteKeeper Backend: User SQLAlchemy Model
==========================================

What:  ORM model representing the `users` table.
Who:   Used by UserStore and by Alembic.

Uniqueness:
    `username` carries the unique constraint `uq_users_username`. The
    database enforces it at insert time, so two concurrent registrations
    of the same username cannot both commit. UserStore translates the
    resulting IntegrityError into DuplicateError.

Security:
    Only the bcrypt hash is stored. The plaintext password never reaches
    this model.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.database import Base
from notekeeper.models.note import utc_now


class User(Base):
    """A registered account. Users are neither updated nor deleted."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Login name, unique and case-sensitive",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the password",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
