"""
ParcelTrack Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn parceltrack.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌────────┐   │
    │  │  Req ID  │→│   Logging   │→│ GZip │→│  CORS  │   │
    │  └──────────┘ └─────────────┘ └──────┘ └────────┘   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌────────┐ ┌──────┐  │
    │  │ /api/packages│ │ / /edit  │ │/uploads│ │health│  │
    │  └──────────────┘ └──────────┘ └────────┘ └──────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Storage→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the record store's directory and the uploads directory
    3. Log startup complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from parceltrack import __version__
from parceltrack.config import settings
from parceltrack.exceptions import (
    FileStorageError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from parceltrack.middleware.logging import RequestLoggingMiddleware
from parceltrack.middleware.request_id import RequestIDMiddleware, request_id_var
from parceltrack.routes import health, packages, pages

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup (before any other initialization).
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries that log every request at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def ensure_directories() -> None:
    """Create the record store's parent directory, the public directory and the uploads directory."""
    Path(settings.data_file).resolve().parent.mkdir(parents=True, exist_ok=True)
    Path(settings.public_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging and directories. Shutdown: log only (no pooled resources)."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("ParcelTrack Backend %s starting up...", __version__)

    ensure_directories()
    logger.info("Record store: %s", Path(settings.data_file).resolve())
    logger.info("Upload directory: %s", Path(settings.upload_dir).resolve())

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("ParcelTrack Backend shut down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request (client can fix the input)
        NotFoundError           → 404 Not Found
        StorageError            → 500 (record store read/write failure)
        FileStorageError        → 500 (photo could not be saved)
        Exception (fallback)    → 500 (unexpected errors)

    Every body carries `message`; store paths and OS errors are logged only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input; report which field and why."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Requested resource doesn't exist."""
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Record store failure. Generic message; details are logged."""
        rid = request_id_var.get("")
        logger.error("[%s] Record store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "storage_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        """Upload write failure. Generic message; details are logged."""
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500 with a request ID; stack trace is logged only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="ParcelTrack API",
        description=(
            "Package tracking records: create, list, fetch and edit shipments "
            "with sender/recipient details, status and an optional photo."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = first to run)
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

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(packages.router)
    app.include_router(pages.router)
    app.include_router(health.router)

    # ── Uploaded Photos ───────────────────────────────────────────────────
    # StaticFiles checks the directory when mounted, so create it first
    ensure_directories()
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir),
        name="uploads",
    )
    # Everything else under public_dir; mounted last so it only sees unmatched paths
    app.mount("/", StaticFiles(directory=settings.public_dir), name="public")

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `parceltrack.main:app` to be importable
app = create_app()
