"""
Local Library: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes logging setup, middleware registration, route mounting,
       error pages and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn locallibrary.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐             │
    │  │ Req ID   │→│ Logging  │→│  GZip    │             │
    │  └──────────┘ └──────────┘ └──────────┘             │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌─────────┐ ┌────────┐ ┌───────────┐  │
    │  │ /catalog │ │ authors │ │ books  │ │ copies    │  │
    │  └──────────┘ └─────────┘ └────────┘ └───────────┘  │
    │  ┌──────────┐ ┌─────────┐ ┌───────────────────────┐ │
    │  │ genres   │ │ /health │ │ /static (CSS)         │ │
    │  └──────────┘ └─────────┘ └───────────────────────┘ │
    │                                                     │
    │  Error Pages (error.html):                          │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 │ HTTPException→its code │ *→500│   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from locallibrary import __version__
from locallibrary.config import settings
from locallibrary.database import dispose_engine
from locallibrary.exceptions import LibraryError
from locallibrary.middleware.logging import RequestLoggingMiddleware
from locallibrary.middleware.request_id import RequestIDMiddleware, request_id_var
from locallibrary.routes import authors, book_instances, books, catalog, genres, health
from locallibrary.templating import STATIC_DIR, render

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Access lines come from locallibrary.access (RequestLoggingMiddleware),
    so uvicorn's own access log is turned down to avoid duplicates.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate deployment settings (logged, not fatal, so /health
           can still report the problem)
    Shutdown:
        1. Dispose the database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("%s %s starting up (%s)", settings.app_title, __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    logger.info("Server ready at http://%s:%d/catalog/", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("%s shutting down...", settings.app_title)
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every error that leaves a handler to the generic error page.

    Handler hierarchy:
        LibraryError subclasses → exc.status_code (NotFound 404, Database 500)
        HTTPException           → its own status (unknown route 404, 405)
        Exception (fallback)    → 500

    The page shows the message and the request ID, never a stack trace,
    SQL or the exception context; those go to the server log.
    """

    @app.exception_handler(LibraryError)
    async def handle_library_error(request: Request, exc: LibraryError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return render(
            request,
            "error.html",
            {"title": "Error", "message": exc.message, "status_code": exc.status_code, "request_id": rid},
            status_code=exc.status_code,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        rid = request_id_var.get("")
        message = "Not Found" if exc.status_code == 404 else str(exc.detail)
        return render(
            request,
            "error.html",
            {"title": "Error", "message": message, "status_code": exc.status_code, "request_id": rid},
            status_code=exc.status_code,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic page for the user, full traceback in the log."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return render(
            request,
            "error.html",
            {
                "title": "Error",
                "message": "An unexpected error occurred.",
                "status_code": 500,
                "request_id": rid,
            },
            status_code=500,
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
        title=settings.app_title,
        description="Server-rendered catalog of authors, books, genres and book copies.",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Static Files & Routes ─────────────────────────────────────────────
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.include_router(catalog.router)
    app.include_router(authors.router)
    app.include_router(books.router)
    app.include_router(book_instances.router)
    app.include_router(genres.router)
    app.include_router(health.router)

    return app


# uvicorn expects `locallibrary.main:app` to be importable
app = create_app()
