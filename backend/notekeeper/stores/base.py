"""
Shared store plumbing: the storage error boundary and the unit-of-work commit.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import (
    DataError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.exceptions import StorageUnavailableError, ValidationError

logger = logging.getLogger(__name__)

_UNAVAILABLE = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    OSError,
    asyncio.TimeoutError,
)


async def _rollback_quietly(session: AsyncSession, operation: str) -> None:
    try:
        await session.rollback()
    except SQLAlchemyError as e:
        # The original failure is re-raised by the caller
        logger.warning("Rollback after failed '%s' also failed: %s", operation, e)


@asynccontextmanager
async def storage_guard(session: AsyncSession, operation: str) -> AsyncIterator[None]:
    """
    Translate driver-level failures inside the block into domain errors.

    Mapping:
        IntegrityError                      → rolled back, re-raised unchanged
                                              (callers map it to DuplicateError)
        DataError                           → ValidationError (400): the
                                              database refused a value the
                                              client sent
        OperationalError, InterfaceError,
        pool TimeoutError, OSError,
        asyncio.TimeoutError                → StorageUnavailableError (503)

    Anything else (e.g. ProgrammingError) is a bug, not an outage; it is
    rolled back and propagates to the 500 handler. In every failure case
    the session is rolled back, so no partial write survives.
    """
    try:
        yield
    except IntegrityError:
        await _rollback_quietly(session, operation)
        raise
    except DataError as e:
        await _rollback_quietly(session, operation)
        logger.warning("Value rejected by the database during '%s': %s", operation, e.orig)
        raise ValidationError(
            message="a value in the request cannot be stored",
            context={"operation": operation, "error_type": type(e.orig).__name__},
        ) from e
    except _UNAVAILABLE as e:
        await _rollback_quietly(session, operation)
        logger.error("Storage failure during '%s': %s", operation, e)
        raise StorageUnavailableError(
            context={"operation": operation, "error_type": type(e).__name__},
        ) from e
    except SQLAlchemyError:
        await _rollback_quietly(session, operation)
        raise


class BaseStore:
    """Holds the session shared by every store in one request."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        """Commit the current unit of work."""
        async with storage_guard(self.session, "commit"):
            await self.session.commit()
