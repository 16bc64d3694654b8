"""
FastAPI application factory.

Assembles the app, registers all routers and exception handlers, and
wires up lifecycle events.  Database schema is managed by Alembic — NOT
create_all.
"""

import logging

from fastapi import FastAPI

from livesession.controllers.inventory_controller import router as inventory_router
from livesession.controllers.session_controller import router as session_router
from livesession.controllers.user_controller import router as user_router
from livesession.core.config import settings
from livesession.core.database import SessionFactory, engine
from livesession.core.errors import register_exception_handlers
from livesession.models import Base  # noqa: F401 — ensures all models are registered
from livesession.services.session_service import SessionLifecycleManager
from livesession.services.session_store import SqlSessionStore

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    register_exception_handlers(app)

    # ── Register routers ─────────────────────────────────────────────
    # /users/session must be matched before /users/{user_id}.
    app.include_router(session_router)
    app.include_router(user_router)
    app.include_router(inventory_router)

    # ── Startup / Shutdown ───────────────────────────────────────────
    @app.on_event("startup")
    async def on_startup() -> None:
        """Optionally rebuild the live-session counter from the store.

        NOTE: Database schema is managed by Alembic migrations.
        Run `alembic upgrade head` before starting the app.
        """
        if not settings.SESSION_COUNTER_RESYNC_ON_STARTUP:
            return
        async with SessionFactory() as db:
            await SessionLifecycleManager(SqlSessionStore(db)).resync_counter()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await engine.dispose()
        logger.info("Database engine disposed.")

    # ── Health check ─────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
