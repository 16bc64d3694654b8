"""
Shared test fixtures and configuration for the entire test suite.

Provides: in-memory SQLite databases, session managers over both store
backends, and an HTTP client bound to a fully wired app.
"""

import os

# Must be set before livesession.core.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from livesession.controllers.session_controller import get_session_manager
from livesession.core.database import get_db
from livesession.main import create_app
from livesession.models import Base
from livesession.services.session_counter import SessionCounter
from livesession.services.session_service import SessionLifecycleManager
from livesession.services.session_store import InMemorySessionStore, SessionStore, SqlSessionStore


@pytest.fixture
async def engine():
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def counter() -> SessionCounter:
    return SessionCounter()


@pytest.fixture
def memory_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def manager(memory_store, counter) -> SessionLifecycleManager:
    return SessionLifecycleManager(memory_store, counter)


@pytest.fixture
def mock_store():
    mock = MagicMock(spec=SessionStore)
    mock.insert_unique = AsyncMock()
    mock.find_one = AsyncMock(return_value=None)
    mock.update_merge = AsyncMock(return_value=0)
    mock.delete_one = AsyncMock(return_value=0)
    mock.delete_many = AsyncMock(return_value=0)
    mock.count = AsyncMock(return_value=0)
    return mock


# -----------------------------------------------------------------------------
# APP
# -----------------------------------------------------------------------------


@pytest.fixture
def app(session_factory, counter):
    """App wired to the test database and a fresh session counter."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_session_manager(db: AsyncSession = Depends(get_db)):
        return SessionLifecycleManager(SqlSessionStore(db), counter)

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_manager] = override_get_session_manager
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def create_user(client):
    """Factory: register a player and return its user id."""

    async def _create(username: str = "testuser", playername: str = "TestingUser", password: str = "222222") -> int:
        res = await client.post(
            "/users",
            json={"username": username, "playername": playername, "password": password},
        )
        assert res.status_code == 201
        return res.json()["userId"]

    return _create
