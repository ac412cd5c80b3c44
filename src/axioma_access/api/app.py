"""
axioma_access.api.app

FastAPI app factory for the Axioma access service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from axioma_access import __version__
from axioma_access.api.routers.access import router as access_router
from axioma_access.api.routers.admin import router as admin_router
from axioma_access.api.routers.dev_auth import router as dev_auth_router
from axioma_access.api.routers.health import router as health_router
from axioma_access.db.init_db import init_db
from axioma_access.db.session import create_engine, create_sessionmaker
from axioma_access.observability.logging import configure_logging, get_logger
from axioma_access.observability.middleware import RequestContextMiddleware
from axioma_access.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Axioma Access",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(access_router)
    app.include_router(admin_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Composition root only: access decisions live in `axioma_access.access`.
