"""Payroll Reports API — application assembly.

Invariants:
    - Logging configured and the database engine created before the first
      request; the engine is disposed on shutdown
    - Routers and error handlers are registered explicitly in create_app()

Run with: uvicorn payroll_reports.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import payroll_reports.infrastructure.database as database
from payroll_reports.api.error_handlers import register_error_handlers
from payroll_reports.api.routes import health, reports
from payroll_reports.config import Settings, get_settings
from payroll_reports.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"{health.SERVICE_NAME} {health.SERVICE_VERSION} ready")
    try:
        yield
    finally:
        await manager.dispose()
        database.db_manager = None
        logger.info(f"{health.SERVICE_NAME} stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API. An explicit settings object replaces get_settings() everywhere."""
    application = FastAPI(
        title="Payroll Reports API",
        version=health.SERVICE_VERSION,
        lifespan=lifespan,
    )
    if settings is None:
        settings = get_settings()
    else:
        application.dependency_overrides[get_settings] = lambda: settings
    application.state.settings = settings
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(health.router)
    application.include_router(reports.router)
    register_error_handlers(application)
    return application


app = create_app()
