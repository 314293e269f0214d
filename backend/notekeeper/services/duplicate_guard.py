"""
NoteKeeper Backend: Duplicate Guard
====================================

What:  Rejects a new note whose content exactly equals an existing note's.
When:  Only when settings.note_duplicate_guard is enabled.

Users are not checked here. Username uniqueness is the `uq_users_username`
constraint, enforced atomically by the database at insert time (see
UserStore.create); a separate check-then-insert would race.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.exceptions import DuplicateError
from notekeeper.models.note import Note
from notekeeper.stores.base import storage_guard

logger = logging.getLogger(__name__)


async def ensure_unique_note_content(session: AsyncSession, content: str) -> None:
    """
    Raise DuplicateError if any stored note has exactly this content.

    Comparison is exact: case and whitespace are significant.
    Nothing is written in either outcome.
    """
    async with storage_guard(session, "check duplicate note"):
        result = await session.execute(
            select(Note.id).where(Note.content == content).limit(1)
        )
        existing = result.scalar_one_or_none()

    if existing is not None:
        logger.info("Rejected duplicate note content (matches %s)", existing)
        raise DuplicateError(
            field="content",
            value=content,
            resource="Note",
            context={"existing_id": str(existing)},
        )
