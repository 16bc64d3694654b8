"""
Session controller — live session lifecycle under /users/session.

Every route except creation identifies the user by ``userId`` in the
JSON body.  Creation authenticates ``username`` + ``password`` first
and opens the session for the matching user.

Status mapping (errors are translated by the handlers in core.errors):
    400  malformed body / non-numeric userId
    401  bad credentials (create only)
    404  no session for this user
    409  the user already has a session (create only)
    500  store failure, no detail sent to the client
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from livesession.core.database import get_db
from livesession.schemas import (
    DeleteAllResponse,
    MessageResponse,
    SessionCreateRequest,
    SessionOut,
    SessionUpdateRequest,
    SessionUserRequest,
)
from livesession.services import user_service
from livesession.services.session_service import SessionLifecycleManager
from livesession.services.session_store import SqlSessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/session", tags=["Sessions"])


async def get_session_manager(db: AsyncSession = Depends(get_db)) -> SessionLifecycleManager:
    """Request-scoped manager over the request's database session."""
    return SessionLifecycleManager(SqlSessionStore(db))


@router.post("", response_model=SessionOut, status_code=201)
async def create_session(
    body: SessionCreateRequest,
    db: AsyncSession = Depends(get_db),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    """Authenticate the user and open their live session."""
    logger.debug("POST request to /users/session (username: %s)", body.username)
    user = await user_service.authenticate_user(body.username, body.password, db)
    return await manager.create(user.id)


@router.get("", response_model=SessionOut)
async def get_session(
    body: SessionUserRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    logger.debug("GET request to /users/session (userId: %s)", body.user_id)
    return await manager.get(body.user_id)


@router.put("", response_model=MessageResponse)
async def update_session(
    body: SessionUpdateRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    """Merge the provided fields into the user's session."""
    logger.debug("PUT request to /users/session (userId: %s)", body.user_id)
    if not await manager.update(body.user_id, body):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return MessageResponse(detail="Session updated")


@router.delete("", response_model=MessageResponse)
async def delete_session(
    body: SessionUserRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    logger.debug("DELETE request to /users/session (userId: %s)", body.user_id)
    if not await manager.delete(body.user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return MessageResponse(detail="Session deleted")


@router.delete("/all", response_model=DeleteAllResponse)
async def delete_all_sessions(
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    logger.debug("DELETE request to /users/session/all")
    deleted = await manager.delete_all()
    return DeleteAllResponse(deleted=deleted)
