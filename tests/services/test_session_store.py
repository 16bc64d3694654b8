"""
Tests for the session store backends.

Both backends must honour the same contract, so the behavioural tests
run against each of them.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from livesession.models import Base, LiveSession
from livesession.schemas import SessionOut
from livesession.services.session_store import (
    DuplicateSessionError,
    InMemorySessionStore,
    SessionStoreError,
    SqlSessionStore,
)


@pytest.fixture(params=["memory", "sql"])
def store(request, db):
    if request.param == "memory":
        return InMemorySessionStore()
    return SqlSessionStore(db)


def _session(user_id: int, session_id: str | None = None) -> SessionOut:
    return SessionOut(session_id=session_id or f"session-{user_id}", user_id=user_id)


class TestInsertAndFind:
    async def test_find_returns_inserted_session(self, store):
        await store.insert_unique(_session(7))

        found = await store.find_one(7)

        assert found == _session(7)
        assert found.external_net.ip_address == ""
        assert found.internal_net.tv_port == 0

    async def test_find_missing_returns_none(self, store):
        assert await store.find_one(404) is None

    async def test_duplicate_user_is_rejected_without_side_effects(self, store):
        await store.insert_unique(_session(7, "first"))

        with pytest.raises(DuplicateSessionError) as exc_info:
            await store.insert_unique(_session(7, "second"))

        assert exc_info.value.user_id == 7
        assert (await store.find_one(7)).session_id == "first"
        assert await store.count() == 1


class TestUpdateMerge:
    async def test_nested_field_merges_at_sub_field_level(self, store):
        await store.insert_unique(_session(7))
        await store.update_merge(7, {"external_net": {"ip_address": "10.0.0.1", "server_port": 27015}})

        matched = await store.update_merge(7, {"external_net": {"client_port": 32145}})

        assert matched == 1
        found = await store.find_one(7)
        assert found.external_net.client_port == 32145
        assert found.external_net.ip_address == "10.0.0.1"
        assert found.external_net.server_port == 27015
        assert found.external_net.tv_port == 0
        assert found.internal_net == _session(7).internal_net

    async def test_top_level_fields(self, store):
        await store.insert_unique(_session(7))

        await store.update_merge(7, {"current_room_id": 323, "current_channel_index": 2})

        found = await store.find_one(7)
        assert found.current_room_id == 323
        assert found.current_channel_index == 2
        assert found.current_channel_server_index == 0

    async def test_missing_session_matches_nothing(self, store):
        assert await store.update_merge(404, {"current_room_id": 1}) == 0

    async def test_empty_changes_report_existence(self, store):
        await store.insert_unique(_session(7))

        assert await store.update_merge(7, {}) == 1
        assert await store.update_merge(404, {}) == 0

    async def test_sql_merge_bumps_updated_at(self, db):
        store = SqlSessionStore(db)
        await store.insert_unique(_session(7))
        await db.execute(
            update(LiveSession).where(LiveSession.user_id == 7).values(updated_at=datetime(2000, 1, 1))
        )
        await db.commit()

        await store.update_merge(7, {"current_room_id": 5})

        touched = await db.scalar(select(LiveSession.updated_at).where(LiveSession.user_id == 7))
        assert touched.year > 2000


class TestDelete:
    async def test_delete_one_then_again(self, store):
        await store.insert_unique(_session(7))

        assert await store.delete_one(7) == 1
        assert await store.delete_one(7) == 0
        assert await store.find_one(7) is None

    async def test_delete_many_removes_everything(self, store):
        await store.insert_unique(_session(1))
        await store.insert_unique(_session(2))

        assert await store.delete_many() == 2
        assert await store.count() == 0

    async def test_delete_many_on_empty_store(self, store):
        assert await store.delete_many() == 0


class TestSqlStoreFailures:
    async def test_connection_errors_become_store_errors(self):
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
        store = SqlSessionStore(db)

        with pytest.raises(SessionStoreError):
            await store.find_one(7)
        with pytest.raises(SessionStoreError):
            await store.insert_unique(_session(7))
        with pytest.raises(SessionStoreError):
            await store.delete_many()

    async def test_session_id_collision_is_not_a_duplicate_user(self, db):
        store = SqlSessionStore(db)
        await store.insert_unique(_session(7, "same-id"))

        with pytest.raises(SessionStoreError) as exc_info:
            await store.insert_unique(_session(8, "same-id"))

        assert not isinstance(exc_info.value, DuplicateSessionError)
        assert await store.find_one(8) is None
        assert await store.count() == 1

    async def test_unrelated_integrity_errors_are_store_errors(self):
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = IntegrityError(
            "INSERT", {}, Exception("NOT NULL constraint failed: live_sessions.session_id"),
        )

        with pytest.raises(SessionStoreError) as exc_info:
            await SqlSessionStore(db).insert_unique(_session(7))

        assert not isinstance(exc_info.value, DuplicateSessionError)
        db.rollback.assert_awaited()

    async def test_concurrent_inserts_for_one_user(self, tmp_path):
        """Separate connections racing on the unique index: one wins."""
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(engine, expire_on_commit=False)

        async def attempt(n: int):
            async with factory() as db:
                await SqlSessionStore(db).insert_unique(_session(7, f"attempt-{n}"))

        try:
            results = await asyncio.gather(*(attempt(n) for n in range(5)), return_exceptions=True)
            async with factory() as db:
                assert await SqlSessionStore(db).count() == 1
        finally:
            await engine.dispose()

        assert sum(1 for r in results if r is None) == 1
        assert all(isinstance(r, DuplicateSessionError) for r in results if r is not None)
