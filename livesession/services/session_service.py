"""
Session service — lifecycle of live game sessions.

Handles:
- Creating the single live session a user may hold
- Reading and partially updating it (field-level merge)
- Deleting one session, or every session at once
- Keeping the process-wide live-session counter in step

Concurrency rules:
- One session per user.  Enforced by the store's atomic unique insert,
  never by an existence check followed by an insert, and never by an
  in-process lock (several service instances may share one store).
- The counter moves only after the store confirms the write.

Failure rules:
- Store failures become `InternalError` and are NOT retried here: a
  retried create after a lost response would report a spurious conflict.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from livesession.core.errors import ConflictError, InternalError, InvalidInputError, NotFoundError
from livesession.schemas import DB_INT_MAX, SessionOut, SessionUpdate
from livesession.services.session_counter import SessionCounter, session_counter
from livesession.services.session_store import (
    DuplicateSessionError,
    SessionStore,
    SessionStoreError,
)

logger = logging.getLogger(__name__)


def _check_user_id(user_id: int) -> int:
    if isinstance(user_id, bool) or not isinstance(user_id, int) or not 1 <= user_id <= DB_INT_MAX:
        raise InvalidInputError(
            "userId must be a positive integer",
            details={"userId": repr(user_id)},
        )
    return user_id


@contextmanager
def _store_errors(action: str, user_id: int | None = None) -> Iterator[None]:
    """Translate store failures into `InternalError`."""
    try:
        yield
    except DuplicateSessionError:
        raise
    except SessionStoreError as exc:
        logger.error("Session store failed to %s (user_id=%s): %s", action, user_id, exc)
        raise InternalError(f"Could not {action}") from exc


class SessionLifecycleManager:
    def __init__(self, store: SessionStore, counter: SessionCounter = session_counter):
        self.store = store
        self.counter = counter

    async def create(self, user_id: int) -> SessionOut:
        """
        Open a session for `user_id` with zeroed network blocks and
        topology.  Raises `ConflictError` if the user already has one.
        """
        _check_user_id(user_id)
        session = SessionOut(session_id=str(uuid.uuid4()), user_id=user_id)

        try:
            with _store_errors("create session", user_id):
                await self.store.insert_unique(session)
        except DuplicateSessionError as exc:
            logger.warning("Tried to create a session for a user that already has one (userId: %s)", user_id)
            raise ConflictError(
                "A session already exists for this user",
                details={"userId": user_id},
            ) from exc

        live = self.counter.increment()
        logger.info("Session %s created for user %s (%s live)", session.session_id, user_id, live)
        return session

    async def get(self, user_id: int) -> SessionOut:
        _check_user_id(user_id)
        with _store_errors("read session", user_id):
            session = await self.store.find_one(user_id)
        if session is None:
            raise NotFoundError("Session not found", details={"userId": user_id})
        return session

    async def update(self, user_id: int, payload: SessionUpdate) -> bool:
        """
        Merge the provided fields into the stored session.

        Nested network blocks merge per sub-field, so updating only
        ``externalNet.clientPort`` leaves the other ports and the ip
        untouched.  Returns False when the user has no session.
        """
        _check_user_id(user_id)
        with _store_errors("update session", user_id):
            matched = await self.store.update_merge(user_id, payload.changes())
        return matched > 0

    async def delete(self, user_id: int) -> bool:
        _check_user_id(user_id)
        with _store_errors("delete session", user_id):
            deleted = await self.store.delete_one(user_id)
        if deleted == 0:
            return False

        live = self.counter.decrement()
        logger.info("Session deleted for user %s (%s live)", user_id, live)
        return True

    async def delete_all(self) -> int:
        """
        Remove every session and reset the counter to zero.

        The reset is unconditional, so it also resyncs a counter that had
        drifted from the store.  Returns how many sessions were removed.
        """
        with _store_errors("delete all sessions"):
            deleted = await self.store.delete_many()
        self.counter.reset()
        logger.info("Deleted all sessions (%s removed)", deleted)
        return deleted

    async def resync_counter(self) -> int:
        """Recompute the counter from the store's session count."""
        with _store_errors("count sessions"):
            live = await self.store.count()
        self.counter.set(live)
        logger.info("Session counter resynced to %s", live)
        return live
