from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI

from tracker.api.dependencies import ApplicationContainer
from tracker.api.errors import register_error_handlers
from tracker.api.middleware import register_middleware
from tracker.api.routers import users as users_router
from tracker.api.routers import worklogs as worklogs_router
from tracker.config import Settings, get_settings
from tracker.infrastructure.db_factory import PoolManager
from tracker.infrastructure.people_client import PeopleClient
from tracker.stores.users import PostgresUserStore
from tracker.stores.worklogs import PostgresWorklogStore

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    When `container` is given it is used as-is and the lifespan opens no
    resources; otherwise the lifespan wires the PostgreSQL stores and the
    people-info client from `settings`.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Time Tracker",
        version="1.0",
        description="CRUD users, start/finish worklogs and watch them for users.",
        lifespan=_create_lifespan(settings, container),
    )

    register_middleware(app)
    register_error_handlers(app)

    app.include_router(users_router.router)
    app.include_router(worklogs_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings, container: Optional[ApplicationContainer]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if container is not None:
            app.state.container = container  # type: ignore[attr-defined]
            yield
            return

        pool_manager = PoolManager(settings)
        pool = await pool_manager.open()
        people = PeopleClient(
            settings.external_api_base_url, timeout=settings.external_api_timeout
        )
        app.state.container = ApplicationContainer(  # type: ignore[attr-defined]
            settings=settings,
            user_store=PostgresUserStore(pool, timeout=settings.req_timeout),
            worklog_store=PostgresWorklogStore(pool, timeout=settings.req_timeout),
            people=people,
            pool_manager=pool_manager,
        )
        logger.info("application started", extra={"env": settings.app_env})

        try:
            yield
        finally:
            logger.info("shutting down server...")
            await people.close()
            await pool_manager.close(settings.shutdown_grace_period)
            logger.info("server stopped gracefully")

    return lifespan


__all__ = ["create_application"]
