"""
NoteKeeper Backend: Note Store
===============================

What:  Keyed collection of Note rows.
Who:   Used by NoteService; one instance per request session.

Operations:
    list()       → every note, insertion order
    get(id)      → the note, or NotFoundError
    create(note) → assigns an id if missing, inserts, returns the stored note
    delete(id)   → removes the note if present, returns whether it existed
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select

from notekeeper.exceptions import NotFoundError
from notekeeper.models.note import Note
from notekeeper.services.identifier_service import new_identifier
from notekeeper.stores.base import BaseStore, storage_guard

logger = logging.getLogger(__name__)


class NoteStore(BaseStore):

    async def list(self) -> List[Note]:
        async with storage_guard(self.session, "list notes"):
            result = await self.session.execute(
                select(Note).order_by(Note.created_at.asc())
            )
            return list(result.scalars().all())

    async def get(self, note_id: uuid.UUID) -> Note:
        """
        Fetch one note by id.

        Raises:
            NotFoundError: no note has this id
            StorageUnavailableError: query failed
        """
        async with storage_guard(self.session, "get note"):
            result = await self.session.execute(
                select(Note).where(Note.id == note_id)
            )
            note = result.scalar_one_or_none()

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def create(self, note: Note) -> Note:
        """Insert a validated note and flush it. The caller commits."""
        if note.id is None:
            note.id = new_identifier()
        async with storage_guard(self.session, "create note"):
            self.session.add(note)
            await self.session.flush()
        logger.info("Note record created: %s", note.id)
        return note

    async def delete(self, note_id: uuid.UUID) -> bool:
        async with storage_guard(self.session, "delete note"):
            result = await self.session.execute(
                delete(Note).where(Note.id == note_id)
            )
        removed = (result.rowcount or 0) > 0
        if removed:
            logger.info("Note record deleted: %s", note_id)
        return removed
