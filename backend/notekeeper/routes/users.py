"""
NoteKeeper Backend: Users and Login Route Handlers
===================================================

What:  POST/GET /api/users and POST /api/login.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.schemas.note import ErrorResponse
from notekeeper.schemas.user import LoginResponse, UserResponse
from notekeeper.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid body or username already taken", "model": ErrorResponse},
        503: {"description": "Data store unavailable", "model": ErrorResponse},
    },
    summary="Register a user",
    description="Body: {\"username\": str, \"name\": str, \"password\": str}. "
                "The response never contains password fields.",
)
async def create_user(
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.register_user(db, payload)


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List all users",
)
async def list_users(
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Exchange credentials for a token",
)
async def login(
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await user_service.login(db, payload)
