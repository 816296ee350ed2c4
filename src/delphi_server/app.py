"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that opens the embedded store and builds the
    SessionRepository once
  - CORS middleware
  - Global exception handlers (DelphiError → 400/404/409/422/500)
  - All API routes mounted under ``/api``, Swagger UI at ``/api/swagger``
  - An optional static file mount
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``delphi-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from delphi_db.engine import create_engine, dispose_engine
from delphi_db.repository import SessionRepository
from delphi_db.store import SQLAlchemyDocumentStore
from delphi_estimation.errors import DelphiError

from delphi_server.config import ServerSettings, load_settings
from delphi_server.errors import delphi_error_handler, generic_error_handler
from delphi_server.routes import API_PREFIX, register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan - runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Create the async engine for the embedded store
      2. Build the ``SessionRepository`` and ensure the sessions table
      3. Stash both on ``app.state`` for dependency injection

    Shutdown:
      1. Dispose the engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    engine = create_engine(settings.database_url)
    repository = SessionRepository(SQLAlchemyDocumentStore(engine))
    await repository.create_tables()
    logger.info("Session store ready at %s", engine.url)

    app.state.engine = engine
    app.state.repository = repository

    yield

    # --- Shutdown ---
    await dispose_engine(engine)
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Delphi Estimation API Server",
        description="A backend for planning poker with the Delphi estimate method",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=f"{API_PREFIX}/swagger",
        openapi_url=f"{API_PREFIX}/openapi.json",
        redoc_url=None,
    )

    # Store settings so the lifespan handler can read them
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(DelphiError, delphi_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe - verifies store connectivity."""
        try:
            async with app.state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": str(exc)}

    # --- Mount all API routes ---
    register_routes(app)

    # --- Static files, only when both prefix and path are configured ---
    if settings.static_prefix and settings.static_path:
        app.mount(
            settings.static_prefix,
            StaticFiles(directory=settings.static_path, html=True),
            name="static",
        )

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn delphi_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``delphi-server``.

    Always a single worker: session locks are held in process memory.
    """
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "delphi_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
        workers=1,
    )
