"""
NoteKeeper Backend: Store Tests
================================

What:  NoteStore and UserStore against real SQLite, plus the storage error
       boundary against a mock session.

What we test:
    ✅ Notes list in insertion order; get/delete by id
    ✅ Deleting an absent id reports False and changes nothing
    ✅ Username uniqueness is enforced by the database constraint (case-sensitive)
    ✅ Other integrity failures are not reported as a duplicate username
    ✅ Two concurrent registrations of one username: exactly one wins
    ✅ Outages become StorageUnavailableError after a rollback
    ✅ Values the database refuses become ValidationError; bugs stay bugs
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import DataError, IntegrityError, OperationalError, ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conftest import users_in_db
from notekeeper.database import build_engine, create_schema
from notekeeper.exceptions import (
    DuplicateError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from notekeeper.models.note import Note
from notekeeper.models.user import User
from notekeeper.stores import NoteStore, UserStore
from notekeeper.stores.base import storage_guard
from notekeeper.stores.user_store import _is_username_conflict


class TestNoteStore:

    @pytest.mark.asyncio
    async def test_create_assigns_identifier(self, db_session):
        store = NoteStore(db_session)

        note = await store.create(Note(content="first"))
        await store.commit()

        assert isinstance(note.id, uuid.UUID)
        assert (await store.get(note.id)).content == "first"

    @pytest.mark.asyncio
    async def test_list_is_in_insertion_order(self, db_session):
        store = NoteStore(db_session)
        base = datetime.now(timezone.utc)
        for i, content in enumerate(["c", "a", "b"]):
            await store.create(Note(content=content, created_at=base + timedelta(seconds=i)))
        await store.commit()

        assert [n.content for n in await store.list()] == ["c", "a", "b"]

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await NoteStore(db_session).get(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_delete_reports_whether_note_existed(self, db_session):
        store = NoteStore(db_session)
        note = await store.create(Note(content="doomed"))
        await store.commit()

        assert await store.delete(note.id) is True
        await store.commit()
        assert await store.delete(note.id) is False
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_delete_absent_leaves_others(self, db_session, initial_notes):
        store = NoteStore(db_session)

        assert await store.delete(uuid.uuid4()) is False
        assert len(await store.list()) == len(initial_notes)


class TestUserStore:

    @pytest.mark.asyncio
    async def test_get_by_username(self, db_session, root_user):
        store = UserStore(db_session)

        found = await store.get_by_username("root")

        assert found is not None
        assert found.id == root_user.id
        assert await store.get_by_username("nobody") is None

    @pytest.mark.asyncio
    async def test_duplicate_username_raises_duplicate_error(
        self, db_session, db_session_factory, root_user
    ):
        store = UserStore(db_session)

        with pytest.raises(DuplicateError) as exc_info:
            await store.create(User(username="root", name="Other", password_hash="x"))

        assert exc_info.value.field == "username"
        assert "expected `username` to be unique" in exc_info.value.message
        assert exc_info.value.context["constraint"] == "uq_users_username"
        assert len(await users_in_db(db_session_factory)) == 1

    @pytest.mark.asyncio
    async def test_session_usable_after_duplicate(self, db_session, root_user):
        store = UserStore(db_session)
        with pytest.raises(DuplicateError):
            await store.create(User(username="root", name="Other", password_hash="x"))

        created = await store.create(User(username="other", name="Other", password_hash="x"))

        assert created.id is not None
        assert [u.username for u in await store.list()] == ["root", "other"]

    @pytest.mark.asyncio
    async def test_get_missing_user(self, db_session):
        with pytest.raises(NotFoundError):
            await UserStore(db_session).get(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_username_differing_only_in_case_is_distinct(self, db_session, root_user):
        store = UserStore(db_session)

        await store.create(User(username="Root", name="Capital", password_hash="x"))

        assert [u.username for u in await store.list()] == ["root", "Root"]

    @pytest.mark.asyncio
    async def test_not_null_violation_is_not_reported_as_duplicate(
        self, db_session, db_session_factory
    ):
        store = UserStore(db_session)

        with pytest.raises(IntegrityError):
            await store.create(User(username="nameless", name=None, password_hash="x"))

        assert await users_in_db(db_session_factory) == []

    @pytest.mark.asyncio
    async def test_primary_key_clash_is_not_reported_as_duplicate(self, db_session, root_user):
        store = UserStore(db_session)

        with pytest.raises(IntegrityError):
            await store.create(
                User(id=root_user.id, username="fresh", name="Fresh", password_hash="x")
            )

    @pytest.mark.parametrize("message,expected", [
        ('duplicate key value violates unique constraint "uq_users_username"', True),
        ("UNIQUE constraint failed: users.username", True),
        ("NOT NULL constraint failed: users.username", False),
        ("UNIQUE constraint failed: users.id", False),
        ('duplicate key value violates unique constraint "users_pkey"', False),
    ])
    def test_username_conflict_detection(self, message, expected):
        error = IntegrityError("INSERT INTO users", {}, Exception(message))

        assert _is_username_conflict(error) is expected


class TestConcurrentRegistration:
    """Two sessions on a file database race to register one username."""

    @pytest_asyncio.fixture
    async def file_factory(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
        await create_schema(engine)
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_exactly_one_registration_wins(self, file_factory):
        async def register(name: str):
            async with file_factory() as session:
                return await UserStore(session).create(
                    User(username="racer", name=name, password_hash="x")
                )

        results = await asyncio.gather(
            register("first"), register("second"), return_exceptions=True
        )

        winners = [r for r in results if isinstance(r, User)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], DuplicateError)
        users = await users_in_db(file_factory)
        assert [u.name for u in users] == [winners[0].name]


class TestStorageGuard:

    @pytest.mark.asyncio
    async def test_operational_error_becomes_storage_unavailable(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT 1", {}, Exception("connection refused")
        )

        with pytest.raises(StorageUnavailableError) as exc_info:
            await NoteStore(mock_db_session).list()

        assert exc_info.value.context["operation"] == "list notes"
        assert exc_info.value.context["error_type"] == "OperationalError"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_os_error_becomes_storage_unavailable(self, mock_db_session):
        with pytest.raises(StorageUnavailableError) as exc_info:
            async with storage_guard(mock_db_session, "get note"):
                raise ConnectionRefusedError("connection refused")

        assert exc_info.value.context["error_type"] == "ConnectionRefusedError"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_integrity_error_passes_through(self, mock_db_session):
        with pytest.raises(IntegrityError):
            async with storage_guard(mock_db_session, "insert"):
                raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_rollback_does_not_mask_error(self, mock_db_session):
        mock_db_session.rollback = AsyncMock(
            side_effect=OperationalError("ROLLBACK", {}, Exception("gone"))
        )

        with pytest.raises(StorageUnavailableError):
            async with storage_guard(mock_db_session, "commit"):
                raise OperationalError("COMMIT", {}, Exception("gone"))

    @pytest.mark.asyncio
    async def test_commit_failure_is_storage_unavailable(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError(
            "COMMIT", {}, Exception("disk I/O error")
        )

        with pytest.raises(StorageUnavailableError):
            await NoteStore(mock_db_session).commit()

    @pytest.mark.asyncio
    async def test_data_error_becomes_validation_error(self, mock_db_session):
        # What asyncpg reports for a NUL byte in a text column
        mock_db_session.flush.side_effect = DataError(
            "INSERT INTO notes", {}, Exception("invalid byte sequence for encoding \"UTF8\": 0x00")
        )

        with pytest.raises(ValidationError) as exc_info:
            await NoteStore(mock_db_session).create(Note(content="a\x00b"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.context["operation"] == "create note"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_programming_error_is_not_an_outage(self, mock_db_session):
        mock_db_session.execute.side_effect = ProgrammingError(
            "SELECT", {}, Exception("relation \"notes\" does not exist")
        )

        with pytest.raises(ProgrammingError):
            await NoteStore(mock_db_session).list()

        mock_db_session.rollback.assert_awaited_once()
