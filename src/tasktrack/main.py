"""FastAPI application factory.

create_app() returns a configured FastAPI instance. The lifespan owns the
database handle: it is built at startup, kept on app.state.db, and
disposed at shutdown. Middleware, CORS, error handlers and routers are all
registered here.

Run with:  uvicorn tasktrack.main:create_app --factory
       or: tasktrack serve
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasktrack import __version__
from tasktrack.api import api_router
from tasktrack.config import Settings, get_settings
from tasktrack.db.engine import Database
from tasktrack.errors import register_exception_handlers
from tasktrack.log_config import configure_logging
from tasktrack.middleware.request_id import RequestIdMiddleware
from tasktrack.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    A Database passed to create_app() is left for its owner to dispose.
    """
    settings: Settings = app.state.settings
    logger.info(
        "tasktrack.starting",
        version=__version__,
        environment=settings.environment,
    )

    owns_db = getattr(app.state, "db", None) is None
    if owns_db:
        app.state.db = Database(settings.database_url, echo=settings.debug)

    yield

    logger.info("tasktrack.shutdown")
    if owns_db:
        await app.state.db.dispose()
        app.state.db = None


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Settings are loaded from the environment when not given; a missing
    TASKTRACK_JWT_SECRET aborts here, before the app can serve anything.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Tasktrack",
        description="Personal task tracking with cookie sessions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
