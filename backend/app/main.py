"""
Singers API — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles settings, the Database context, middleware,
       exception handlers and the routers of the selected data model.
Who:   uvicorn (`uvicorn app.main:app`) or `python -m app` via run().

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │   GET /   GET /health                               │
    │   GET /singers   GET|PATCH|DELETE /singer/{id}      │
    │   POST /singer   POST /instrument   GET /instruments│
    │                                                     │
    │  Exception Handlers (all 400 unless noted):         │
    │   ValidationError │ InvalidInput │ InvalidKey       │
    │   InsertFailed │ EmptyResult │ Database │ 500 other │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    run():    ping database → exit(1) on failure → serve with uvicorn
    Startup:  logging, optional create_all, connectivity log line
    Shutdown: dispose the engine
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import (
    DatabaseError,
    EmptyResultError,
    InsertFailedError,
    InvalidInputError,
    InvalidKeyError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, instruments, singers, singers_relational

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] app.services.singer_service: Inserted ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(settings)
    logger.info("Singers API %s starting (%s model)", __version__, settings.singer_model)

    if settings.db_create_tables:
        await database.create_tables()
        logger.info("Database tables ensured")

    if await database.ping():
        logger.info("connected to database, app listening on port %d", settings.backend_port)
    else:
        logger.error("unable to connect to database")

    yield

    logger.info("Singers API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to single JSON responses.

    Handler table:
        ValidationError         → 400 {"name", "message", "details"}
        InvalidInputError       → 400 {"error": "Invalid Input"}
        InvalidKeyError         → 400 {"error": message}
        EmptyResultError        → 400 {"error": "No documents in database"}
        DatabaseError           → 400 {"error": <raw driver error>}
        InsertFailedError       → 400 {"error": {"message": "Failed to insert Document"}}
        RequestValidationError  → 400 {"error": ...} (malformed JSON, bad query)
        Exception (fallback)    → 500 {"error": {"message": ...}}
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content=exc.to_body())

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(request: Request, exc: InvalidInputError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid input: %s", rid, exc.context.get("details"))
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(InvalidKeyError)
    async def handle_invalid_key(request: Request, exc: InvalidKeyError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(EmptyResultError)
    async def handle_empty_result(request: Request, exc: EmptyResultError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(InsertFailedError)
    async def handle_insert_failed(request: Request, exc: InsertFailedError):
        rid = request_id_var.get("")
        logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=400, content={"error": {"message": exc.message}})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": {"message": "An unexpected error occurred"}},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Overrides the process-wide settings (tests pick a data model)
        database: Overrides the Database built from settings (tests pass SQLite)
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Singers API",
        description="CRUD over singer documents with embedded or joined band members.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    # Last added = first to execute
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    if settings.singer_model == "relational":
        app.include_router(singers_relational.router)
    else:
        app.include_router(singers.router)
    app.include_router(instruments.router)

    return app


app = create_app()


# ══════════════════════════════════════════════════════════════════════════
# Process Entry Point
# ══════════════════════════════════════════════════════════════════════════

async def _check_connection(settings: Settings) -> bool:
    database = Database.from_settings(settings)
    try:
        return await database.ping()
    finally:
        await database.dispose()


def run() -> None:
    """
    Start the server after verifying the database is reachable.

    Exit status 1 when the initial connection fails.
    """
    setup_logging(default_settings)
    if not asyncio.run(_check_connection(default_settings)):
        logger.error("unable to connect to database")
        sys.exit(1)

    uvicorn.run(
        app,
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_config=None,
    )
