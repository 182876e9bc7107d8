"""User Service API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UserServiceError → {"error": ...} JSON responses
    - The pool is created in the lifespan, stored on app.state, disposed on shutdown
    - Schema initialization failure is logged; it aborts startup only when
      DB_SCHEMA_INIT_FATAL is set
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, users
from app.config import Settings, get_settings
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)


def build_db_manager(settings: Settings) -> DatabaseSessionManager:
    return DatabaseSessionManager(
        settings.sqlalchemy_url,
        pool_size=settings.db_pool_max,
        pool_timeout=settings.db_connection_timeout_seconds,
        pool_recycle=settings.db_idle_timeout_seconds,
        connect_args=settings.connect_args,
    )


async def init_schema(db_manager: DatabaseSessionManager, fatal: bool) -> bool:
    """Create the users table; returns False (or raises when fatal) on failure."""
    try:
        await db_manager.init_schema()
    except Exception as e:
        logger.error(f"Database initialization error: {e}", exc_info=True)
        if fatal:
            raise
        return False
    logger.info("Database initialized")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = build_db_manager(settings)
    app.state.db_manager = db_manager
    try:
        await init_schema(db_manager, settings.db_schema_init_fatal)
        logger.info(f"User management microservice running on port {settings.port}")
        yield
    finally:
        logger.info("User service shutting down")
        await db_manager.dispose()
        app.state.db_manager = None


def create_app() -> FastAPI:
    application = FastAPI(
        title="User Service", version="1.0.0", lifespan=lifespan,
    )
    application.include_router(health.router)
    application.include_router(users.router)
    register_error_handlers(application)
    application.middleware("http")(log_requests)
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
