"""
NoteKeeper Backend: User Store
===============================

What:  Collection of User rows, unique by username.

Uniqueness is never pre-checked. create() inserts and lets the
`uq_users_username` constraint decide; of two concurrent inserts of the
same username exactly one commits and the other sees IntegrityError,
which is reported as DuplicateError. The failed insert is rolled back.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from notekeeper.exceptions import DuplicateError, NotFoundError
from notekeeper.models.user import User
from notekeeper.services.identifier_service import new_identifier
from notekeeper.stores.base import BaseStore, storage_guard

logger = logging.getLogger(__name__)

USERNAME_CONSTRAINT = "uq_users_username"

# How each backend names the violated constraint in its error text
_USERNAME_CONFLICT_MARKERS = (
    USERNAME_CONSTRAINT,                         # PostgreSQL
    "UNIQUE constraint failed: users.username",  # SQLite
)


def _is_username_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _USERNAME_CONFLICT_MARKERS)


class UserStore(BaseStore):

    async def list(self) -> List[User]:
        async with storage_guard(self.session, "list users"):
            result = await self.session.execute(
                select(User).order_by(User.created_at.asc())
            )
            return list(result.scalars().all())

    async def get(self, user_id: uuid.UUID) -> User:
        async with storage_guard(self.session, "get user"):
            user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        async with storage_guard(self.session, "get user by username"):
            result = await self.session.execute(
                select(User).where(User.username == username)
            )
            return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        """
        Insert a user and commit.

        The commit happens here, inside the constraint boundary, so the
        uniqueness outcome is final when this returns.

        Raises:
            DuplicateError: username already taken
            IntegrityError: any other constraint (NOT NULL, primary key)
            StorageUnavailableError: database unreachable
        """
        if user.id is None:
            user.id = new_identifier()
        try:
            async with storage_guard(self.session, "create user"):
                self.session.add(user)
                await self.session.flush()
                await self.session.commit()
        except IntegrityError as e:
            if not _is_username_conflict(e):
                raise
            logger.info("Rejected duplicate username '%s'", user.username)
            raise DuplicateError(
                field="username",
                value=user.username,
                resource="User",
                context={"constraint": USERNAME_CONSTRAINT, "driver_error": type(e.orig).__name__},
            ) from None
        logger.info("User record created: %s (%s)", user.id, user.username)
        return user
