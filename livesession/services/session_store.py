"""
Session store — persistence contract for live sessions.

The lifecycle manager only talks to `SessionStore`; two backends
implement it:
- SqlSessionStore: SQLAlchemy, one `AsyncSession` per request (production)
- InMemorySessionStore: process-local dict (development / tests)

Contract:
- Every operation is atomic for a single session.  Nothing spans calls.
- `insert_unique` checks and inserts in ONE store operation and raises
  `DuplicateSessionError` when the user already has a session.
- `update_merge` writes only the fields present in `changes` (a sparse
  nested dict such as ``{"external_net": {"client_port": 1}}``) and
  returns how many sessions matched.
- Any other failure surfaces as `SessionStoreError`.
"""

import abc
import logging
import threading
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from livesession.models.session import LiveSession
from livesession.schemas import NetworkBlock, SessionOut

logger = logging.getLogger(__name__)

NETWORK_BLOCKS = {"external_net": "external", "internal_net": "internal"}

# How the one-session-per-user index shows up in driver messages:
# Postgres names the index, SQLite names the column.
USER_INDEX_MARKERS = ("ux_live_sessions_user_id", "live_sessions.user_id")


class SessionStoreError(Exception):
    """The store failed for a reason other than a uniqueness violation."""


class DuplicateSessionError(SessionStoreError):
    """A session for this user already exists."""

    def __init__(self, user_id: int):
        super().__init__(f"A session already exists for user {user_id}")
        self.user_id = user_id


class SessionStore(abc.ABC):
    @abc.abstractmethod
    async def insert_unique(self, session: SessionOut) -> None: ...

    @abc.abstractmethod
    async def find_one(self, user_id: int) -> SessionOut | None: ...

    @abc.abstractmethod
    async def update_merge(self, user_id: int, changes: dict[str, Any]) -> int: ...

    @abc.abstractmethod
    async def delete_one(self, user_id: int) -> int: ...

    @abc.abstractmethod
    async def delete_many(self) -> int: ...

    @abc.abstractmethod
    async def count(self) -> int: ...


# ═══════════════════════════════════════════════════════════════
# SQLALCHEMY STORE
# ═══════════════════════════════════════════════════════════════


def _violates_user_index(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in USER_INDEX_MARKERS)


def _flatten(changes: dict[str, Any]) -> dict[str, Any]:
    """Map the nested API shape onto the flat `live_sessions` columns."""
    values: dict[str, Any] = {}
    for key, value in changes.items():
        prefix = NETWORK_BLOCKS.get(key)
        if prefix is None:
            values[key] = value
            continue
        for sub_key, sub_value in value.items():
            values[f"{prefix}_{sub_key}"] = sub_value
    return values


def _to_session(row: LiveSession) -> SessionOut:
    blocks = {
        block: NetworkBlock(
            ip_address=getattr(row, f"{prefix}_ip_address"),
            client_port=getattr(row, f"{prefix}_client_port"),
            server_port=getattr(row, f"{prefix}_server_port"),
            tv_port=getattr(row, f"{prefix}_tv_port"),
        )
        for block, prefix in NETWORK_BLOCKS.items()
    }
    return SessionOut(
        session_id=row.session_id,
        user_id=row.user_id,
        current_channel_server_index=row.current_channel_server_index,
        current_channel_index=row.current_channel_index,
        current_room_id=row.current_room_id,
        **blocks,
    )


class SqlSessionStore(SessionStore):
    """
    SQLAlchemy-backed store.

    Uniqueness comes from the unique index on `live_sessions.user_id`:
    concurrent inserts for the same user race inside the database and
    all but one fail with an IntegrityError.  Each mutating call commits
    on its own so a session is visible to other requests as soon as the
    call returns.
    """

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _rollback(self) -> None:
        try:
            await self._db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")

    async def insert_unique(self, session: SessionOut) -> None:
        stmt = insert(LiveSession).values(**_flatten(session.model_dump()))
        try:
            await self._db.execute(stmt)
            await self._db.commit()
        except IntegrityError as exc:
            await self._rollback()
            if _violates_user_index(exc):
                raise DuplicateSessionError(session.user_id) from exc
            raise SessionStoreError("Failed to insert session") from exc
        except SQLAlchemyError as exc:
            await self._rollback()
            raise SessionStoreError("Failed to insert session") from exc

    async def find_one(self, user_id: int) -> SessionOut | None:
        stmt = (
            select(LiveSession)
            .where(LiveSession.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._db.execute(stmt)
        except SQLAlchemyError as exc:
            raise SessionStoreError("Failed to read session") from exc
        row = result.scalar_one_or_none()
        return _to_session(row) if row is not None else None

    async def update_merge(self, user_id: int, changes: dict[str, Any]) -> int:
        values = _flatten(changes)
        if not values:
            # Nothing to write: report whether the session exists.
            return 1 if await self.find_one(user_id) is not None else 0

        stmt = (
            update(LiveSession)
            .where(LiveSession.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._db.execute(stmt)
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._rollback()
            raise SessionStoreError("Failed to update session") from exc
        return result.rowcount

    async def delete_one(self, user_id: int) -> int:
        stmt = (
            delete(LiveSession)
            .where(LiveSession.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._db.execute(stmt)
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._rollback()
            raise SessionStoreError("Failed to delete session") from exc
        return result.rowcount

    async def delete_many(self) -> int:
        stmt = delete(LiveSession).execution_options(synchronize_session=False)
        try:
            result = await self._db.execute(stmt)
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._rollback()
            raise SessionStoreError("Failed to delete sessions") from exc
        return result.rowcount

    async def count(self) -> int:
        stmt = select(func.count()).select_from(LiveSession)
        try:
            result = await self._db.execute(stmt)
        except SQLAlchemyError as exc:
            raise SessionStoreError("Failed to count sessions") from exc
        return result.scalar_one()


# ═══════════════════════════════════════════════════════════════
# IN-MEMORY STORE (Development/Testing)
# ═══════════════════════════════════════════════════════════════


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store keyed by user id.

    Not for production: sessions are lost on restart and not shared
    between processes.  Every operation runs under one lock, so
    `insert_unique` is atomic even when called from several threads.
    """

    def __init__(self):
        self._sessions: dict[int, SessionOut] = {}
        self._lock = threading.Lock()

    async def insert_unique(self, session: SessionOut) -> None:
        with self._lock:
            if session.user_id in self._sessions:
                raise DuplicateSessionError(session.user_id)
            self._sessions[session.user_id] = session.model_copy(deep=True)
        logger.debug("Stored session %s for user %s", session.session_id, session.user_id)

    async def find_one(self, user_id: int) -> SessionOut | None:
        with self._lock:
            session = self._sessions.get(user_id)
            return session.model_copy(deep=True) if session is not None else None

    async def update_merge(self, user_id: int, changes: dict[str, Any]) -> int:
        with self._lock:
            current = self._sessions.get(user_id)
            if current is None:
                return 0
            update_fields: dict[str, Any] = {}
            for key, value in changes.items():
                if key in NETWORK_BLOCKS:
                    update_fields[key] = getattr(current, key).model_copy(update=value)
                else:
                    update_fields[key] = value
            self._sessions[user_id] = current.model_copy(update=update_fields)
            return 1

    async def delete_one(self, user_id: int) -> int:
        with self._lock:
            return 1 if self._sessions.pop(user_id, None) is not None else 0

    async def delete_many(self) -> int:
        with self._lock:
            removed = len(self._sessions)
            self._sessions.clear()
            return removed

    async def count(self) -> int:
        return len(self._sessions)
