"""
Blog API Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance; the module-level `app` uses the environment settings.
Who:   uvicorn (`uvicorn blog_api.main:app`, or `python -m blog_api`), tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access Log → CORS        │
    │                                                     │
    │  Routes:      /api/posts[/{id}]   /health           │
    │               /  (static client, when present)      │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFound→404  Database→500  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Provision the database (directory, file, table, seed post);
       failure aborts startup and uvicorn exits non-zero
    3. Log the endpoint list

    Shutdown (SIGINT/SIGTERM, handled by uvicorn):
    1. Dispose the database engine (close connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from blog_api import __version__
from blog_api.config import Settings, settings as default_settings
from blog_api.database import initialize_database
from blog_api.exceptions import (
    BlogAPIError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from blog_api.middleware.logging import RequestLoggingMiddleware
from blog_api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from blog_api.routes import health, posts

logger = logging.getLogger(__name__)

ENDPOINTS = (
    "GET    /api/posts",
    "GET    /api/posts/{id}",
    "POST   /api/posts",
    "PUT    /api/posts/{id}",
    "DELETE /api/posts/{id}",
)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] blog_api.routes.posts: message
    Output goes to stdout; containers and systemd capture it from there.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Provision the database before the first request and close it on exit.

    The Database handle goes on app.state; handlers reach it through the
    get_db_session dependency.
    """
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("Blog API %s starting up...", __version__)

    try:
        app.state.database = await initialize_database(settings)
    except BlogAPIError as e:
        logger.critical("Failed to start server: %s | Context: %s", e.message, e.context)
        raise

    logger.info("Server running on port %d", settings.port)
    logger.info("Available endpoints:")
    for endpoint in ENDPOINTS:
        logger.info("   %s", endpoint)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Shutting down server...")
    await app.state.database.dispose()
    logger.info("Database connection closed")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_error(exc: RequestValidationError) -> str:
    """
    Turn FastAPI's field-level errors into one client-facing sentence.

    A missing body is reported the same way as missing fields.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = tuple(first.get("loc", ()))
    if loc and loc[0] == "path":
        return "Invalid post id"
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    if loc == ("body",):
        return "Title and content are required"
    field = ".".join(str(part) for part in loc[1:]) or "body"
    return f"Invalid value for '{field}': {first.get('msg', 'invalid')}"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        NotFoundError                            → 404
        DatabaseError                            → 500 (cause logged, not returned)
        BlogAPIError (base)                      → 500
        Exception (fallback)                     → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        message = _describe_request_error(exc)
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return _error_response(400, message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(BlogAPIError)
    async def handle_app_error(request: Request, exc: BlogAPIError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace goes to the log, never to the client."""
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return _error_response(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to run with; defaults to the environment-loaded
                  singleton. Tests pass their own (temporary database file).
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Blog API",
        description="CRUD REST API for blog posts backed by a single SQLite file.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(posts.router)
    app.include_router(health.router)

    # Static client last, so /api/* and /health win over file lookups
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
        logger.info("Serving client assets from %s", static_dir.resolve())

    return app


# uvicorn expects `blog_api.main:app` to be importable
app = create_app()
