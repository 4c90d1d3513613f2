"""Utility billing FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from utility_billing.api.errors import register_error_handlers
from utility_billing.api.routes import (
    audit,
    bills,
    charges,
    electricity,
    houses,
    mohallas,
    reports,
    water,
)
from utility_billing.config import Settings, get_settings
from utility_billing.models import Base
from utility_billing.services.db import create_db_engine, create_session_factory
from utility_billing.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    # Startup: Initialize database tables
    Base.metadata.create_all(bind=app.state.session_factory.kw["bind"])
    logger.info("Database tables initialized")
    yield
    # Shutdown: Cleanup if needed
    logger.info("Application shutting down")


def create_app(
    settings: Settings | None = None, session_factory: sessionmaker | None = None
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings (defaults to environment settings)
        session_factory: Session factory to use instead of one built from
            ``settings.database_url``
    """
    settings = settings or get_settings()
    if session_factory is None:
        engine = create_db_engine(settings.database_url, settings.database_echo)
        session_factory = create_session_factory(engine)

    app = FastAPI(
        title=settings.api_title,
        description="Admin API for electricity and water billing",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory

    # Include routers
    app.include_router(mohallas.router)
    app.include_router(houses.router)
    app.include_router(charges.router)
    app.include_router(electricity.router)
    app.include_router(water.router)
    app.include_router(bills.router)
    app.include_router(reports.router)
    app.include_router(audit.router)
    register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the API server."""
    load_dotenv()
    settings = get_settings()
    setup_server_logging(settings.log_file, settings.log_level)
    logger.info(f"Starting Uvicorn server on {host}:{port}...")
    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")


if __name__ == "__main__":
    run()
