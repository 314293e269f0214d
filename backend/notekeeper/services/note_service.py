"""
NoteKeeper Backend: Note Service
=================================

What:  Orchestrates every note operation: identifier check, body
       validation, duplicate check, store access.
Who:   Called by the notes route handlers.

Request Flow:
    ┌──────────┐   ┌────────────┐   ┌───────────┐   ┌───────────┐   ┌─────────┐
    │ Received │──▶│ Identifier │──▶│   Body    │──▶│ Duplicate │──▶│  Store  │
    │ (Route)  │   │  Checked   │   │ Validated │   │  Checked  │   │  (DB)   │
    └──────────┘   └────────────┘   └───────────┘   └───────────┘   └─────────┘

    Any failing step raises immediately; nothing has been written yet, so
    an aborted create leaves the store unchanged.

NoteService is stateless. It receives the request's session on each call
and builds a NoteStore around it.
"""

import logging
from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.config import settings
from notekeeper.models.note import Note
from notekeeper.schemas.note import NoteResponse
from notekeeper.services.duplicate_guard import ensure_unique_note_content
from notekeeper.services.identifier_service import parse_identifier
from notekeeper.services.validation import validate_note_payload
from notekeeper.stores.note_store import NoteStore

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes():  every stored note in insertion order
        - get_note():    one note; malformed id vs missing id kept apart
        - create_note(): validate → duplicate guard → insert → commit
        - delete_note(): idempotent removal
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        notes = await NoteStore(db).list()
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, raw_id: str) -> NoteResponse:
        """
        Retrieve a single note by the id taken from the URL path.

        Raises:
            MalformedIdError: raw_id is not a UUID (→ 400)
            NotFoundError: no such note (→ 404)
        """
        note_id = parse_identifier(raw_id, resource="note")
        note = await NoteStore(db).get(note_id)
        return NoteResponse.model_validate(note)

    async def create_note(self, db: AsyncSession, payload: Any) -> NoteResponse:
        """
        Create a note from a raw JSON body.

        Workflow Steps:
            1. Validate content/important
            2. Reject exact-duplicate content (when the guard is enabled)
            3. Insert with a fresh id and commit

        Raises:
            ValidationError: body invalid (→ 400)
            DuplicateError: content already stored, guard enabled (→ 400)
            StorageUnavailableError: database failure (→ 503)
        """
        candidate = validate_note_payload(payload)

        if settings.note_duplicate_guard:
            await ensure_unique_note_content(db, candidate.content)

        store = NoteStore(db)
        note = await store.create(
            Note(content=candidate.content, important=candidate.important)
        )
        await store.commit()

        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, raw_id: str) -> None:
        """
        Delete a note if it exists.

        Deleting an id that is well-formed but absent is not an error.

        Raises:
            MalformedIdError: raw_id is not a UUID (→ 400)
        """
        note_id = parse_identifier(raw_id, resource="note")
        store = NoteStore(db)
        removed = await store.delete(note_id)
        await store.commit()
        if not removed:
            logger.debug("Delete of absent note %s ignored", note_id)


# Stateless; shared by all requests
note_service = NoteService()
