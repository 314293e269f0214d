"""
NoteKeeper Backend: User Service
=================================

What:  Registration, listing and login.
How:   Validates the body, hashes or checks the password in Starlette's
       threadpool (bcrypt is CPU bound), and delegates persistence to
       UserStore.

The plaintext password only ever exists in the validated request object;
the User row receives the bcrypt hash.
"""

import logging
from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from notekeeper.exceptions import AuthenticationError
from notekeeper.models.user import User
from notekeeper.schemas.user import LoginResponse, UserResponse
from notekeeper.security import create_access_token, hash_password, verify_password
from notekeeper.services.validation import validate_login_payload, validate_user_payload
from notekeeper.stores.user_store import UserStore

logger = logging.getLogger(__name__)


class UserService:

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        users = await UserStore(db).list()
        return [UserResponse.model_validate(user) for user in users]

    async def register_user(self, db: AsyncSession, payload: Any) -> UserResponse:
        """
        Create a user account.

        Raises:
            ValidationError: missing/short username, name or password (→ 400)
            DuplicateError: username taken (→ 400, names `username`)
            StorageUnavailableError: database failure (→ 503)
        """
        candidate = validate_user_payload(payload)

        password_hash = await run_in_threadpool(hash_password, candidate.password)

        user = await UserStore(db).create(
            User(
                username=candidate.username,
                name=candidate.name,
                password_hash=password_hash,
            )
        )
        return UserResponse.model_validate(user)

    async def login(self, db: AsyncSession, payload: Any) -> LoginResponse:
        """
        Check credentials and issue a token.

        Unknown username and wrong password produce the same error.

        Raises:
            ValidationError: body missing username or password (→ 400)
            AuthenticationError: credentials do not match (→ 401)
        """
        credentials = validate_login_payload(payload)

        user = await UserStore(db).get_by_username(credentials.username)
        password_ok = user is not None and await run_in_threadpool(
            verify_password, credentials.password, user.password_hash
        )
        if not password_ok:
            logger.info("Failed login for username '%s'", credentials.username)
            raise AuthenticationError()

        token = create_access_token({"sub": user.username, "id": str(user.id)})
        return LoginResponse(token=token, username=user.username, name=user.name)


user_service = UserService()
