"""
NoteKeeper Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:     AsyncMock session for pure unit tests
    ├── db_engine:           fresh in-memory SQLite engine with all tables
    ├── db_session_factory:  sessionmaker bound to db_engine
    ├── db_session:          one session for store-level tests
    ├── test_client:         httpx AsyncClient talking to a fresh app whose
    │                        get_db_session dependency uses db_engine
    ├── initial_notes:       two notes inserted before the test
    └── root_user:           user "root" with password "sekret"
"""

import os

# Settings are read at import time; configure them before any notekeeper import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["NOTE_DUPLICATE_GUARD"] = "false"

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.database import build_engine, create_schema, get_db_session
from notekeeper.models.note import Note
from notekeeper.models.user import User
from notekeeper.security import hash_password

INITIAL_NOTES = [
    {"content": "HTML is easy", "important": False},
    {"content": "Browser can only execute javascript", "important": True},
]


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_something(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite shared through StaticPool; tables created fresh."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(db_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with db_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_session_factory):
    """
    HTTPX AsyncClient wired to a fresh app instance.

    The app's get_db_session dependency is replaced by one that opens
    sessions on the per-test engine.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    from notekeeper.main import create_app

    app = create_app()

    async def override_get_db_session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Seed Data
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def initial_notes(db_session_factory) -> List[dict]:
    """Insert INITIAL_NOTES with increasing timestamps so order is fixed."""
    base = datetime.now(timezone.utc) - timedelta(minutes=5)
    async with db_session_factory() as session:
        for i, data in enumerate(INITIAL_NOTES):
            session.add(Note(created_at=base + timedelta(seconds=i), **data))
        await session.commit()
    return INITIAL_NOTES


@pytest_asyncio.fixture
async def root_user(db_session_factory) -> User:
    async with db_session_factory() as session:
        user = User(username="root", name="Superuser", password_hash=hash_password("sekret"))
        session.add(user)
        await session.commit()
    return user


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

async def notes_in_db(factory: async_sessionmaker) -> List[Note]:
    async with factory() as session:
        result = await session.execute(select(Note).order_by(Note.created_at))
        return list(result.scalars().all())


async def users_in_db(factory: async_sessionmaker) -> List[User]:
    async with factory() as session:
        result = await session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())
