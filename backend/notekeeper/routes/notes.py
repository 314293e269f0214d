"""
NoteKeeper Backend: Notes Route Handlers
=========================================

What:  GET/POST /api/notes and GET/DELETE /api/notes/{id}.
How:   Hands the raw path id and raw JSON body to NoteService; the service
       does identifier parsing and validation so malformed ids (400) and
       missing notes (404) stay distinct. Errors become responses in the
       global exception handlers.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.schemas.note import ErrorResponse, NoteResponse
from notekeeper.services.note_service import note_service

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={
        503: {"description": "Data store unavailable", "model": ErrorResponse},
    },
    summary="List all notes",
)
async def list_notes(
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """Every stored note, oldest first."""
    return await note_service.list_notes(db)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed note id", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        503: {"description": "Data store unavailable", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Args:
        note_id: Taken as a plain string. A UUID-typed path parameter would
                 make FastAPI answer 422 for "asdf" before we can classify it.
    """
    return await note_service.get_note(db, note_id)


@router.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid body or duplicate content", "model": ErrorResponse},
        503: {"description": "Data store unavailable", "model": ErrorResponse},
    },
    summary="Create a note",
    description="Body: {\"content\": str, \"important\": bool (optional, default false)}",
)
async def create_note(
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, payload)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": "Malformed note id", "model": ErrorResponse},
    },
    summary="Delete a note",
    description="Returns 204 whether or not the note existed.",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
