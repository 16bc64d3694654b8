"""
User service — account CRUD & credential checks.

Only what the session routes need: players are created, looked up,
deleted, and their username + password verified before a live session
is opened for them.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from livesession.core.errors import ConflictError, NotFoundError
from livesession.core.security import hash_password, verify_password
from livesession.models.user import User

logger = logging.getLogger(__name__)


async def create_user(
    username: str,
    playername: str,
    password: str,
    db: AsyncSession,
) -> User:
    user = User(
        username=username,
        playername=playername,
        password_hash=hash_password(password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Tried to create a duplicate user (username: %s)", username)
        raise ConflictError("Username or player name already taken") from exc
    return user


async def get_user_by_id(user_id: int, db: AsyncSession) -> User:
    stmt = select(User).where(User.id == user_id)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found", details={"userId": user_id})
    return user


async def delete_user(user_id: int, db: AsyncSession) -> None:
    stmt = delete(User).where(User.id == user_id)
    result = await db.execute(stmt)
    if result.rowcount == 0:
        raise NotFoundError("User not found", details={"userId": user_id})
    await db.flush()


async def authenticate_user(username: str, password: str, db: AsyncSession) -> User:
    """Return the user owning these credentials, or raise 401."""
    stmt = select(User).where(User.username == username)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return user
