"""FastAPI application factory.

Wires the explicitly constructed ``Settings`` into the database, the
registry, the fan-out dispatcher and the routers.  ``hookrelay.main``
re-exports an app built from the environment.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from hookrelay.api.errors import register_error_handlers
from hookrelay.api.routes.endpoints import router as endpoints_router
from hookrelay.api.routes.health import router as health_router
from hookrelay.api.routes.hooks import router as hooks_router
from hookrelay.core.logging import setup_logging
from hookrelay.core.settings import Settings, get_settings
from hookrelay.db.session import build_engine, build_session_factory, init_db
from hookrelay.fanout.dispatcher import FanoutDispatcher

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the relay app.

    ``transport`` replaces the outbound HTTP transport, which lets tests
    answer fan-out requests with ``httpx.MockTransport``.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        if not settings.api_key:
            logger.warning("API_KEY is not set; endpoint registration is disabled")

        engine = build_engine(settings.database_url)
        init_db(engine)
        app.state.session_factory = build_session_factory(engine)

        async with httpx.AsyncClient(transport=transport) as client:
            app.state.dispatcher = FanoutDispatcher(
                client,
                timeout_s=settings.delivery_timeout_s,
                success_statuses=settings.delivery_success_statuses,
            )
            yield

        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(endpoints_router)
    app.include_router(hooks_router)
    return app
