"""
Notes API — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app), or by run().

Application Architecture:
    ┌──────────────────────────────────────────────────┐
    │                   FastAPI App                    │
    │                                                  │
    │  Middleware Chain:                               │
    │  ┌──────────┐ ┌─────────────────┐ ┌───────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS     │  │
    │  └──────────┘ └─────────────────┘ └───────────┘  │
    │                                                  │
    │  Routes:                                         │
    │  ┌────────────────────────┐ ┌─────────────────┐  │
    │  │ /notes, /notes/{id}    │ │ GET /health     │  │
    │  └────────────────────────┘ └─────────────────┘  │
    │                                                  │
    │  Exception Handlers:                             │
    │  ┌────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Store→500  │  │
    │  └────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate remote store configuration (fail fast)
    3. Initialize the Firebase Admin app and the shared store
    Shutdown:
    1. Dispose the Firebase Admin app
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_firebase_app, init_firebase_app
from app.exceptions import NotFoundError, NotesAPIError, StoreError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, notes
from app.services.firebase_store import FirebaseStore
from app.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
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
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    When the app was built with a ready-made store (create_app(store=...)),
    no Firebase app is created and nothing is disposed on shutdown.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Notes API %s starting up...", __version__)

    firebase_app = None
    if app.state.store is None:
        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.error("Configuration error: %s", str(e))
            raise

        firebase_app = init_firebase_app(settings)
        app.state.store = FirebaseStore(firebase_app)
        logger.info(
            "Using %s credentials, collection '%s'",
            settings.credentials_source,
            settings.notes_collection,
        )

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    if firebase_app is not None:
        dispose_firebase_app(firebase_app)
        app.state.store = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    parts = []
    for error in errors:
        # json_invalid carries a character offset, not a field name
        loc = "" if error.get("type") == "json_invalid" else ".".join(
            str(p) for p in error.get("loc", ()) if p != "body"
        )
        msg = error.get("msg", "invalid input")
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error and str(ctx_error) not in msg:
            msg = f"{msg}: {ctx_error}"
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request body"


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    # The access log reads the code back from request.state
    request.state.error_code = error
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 Bad Request (unparseable or mistyped body)
        NotFoundError           → 404 Not Found
        StoreError              → 500 Internal Server Error (store message verbatim)
        NotesAPIError (base)    → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error (generic message)
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body could not be parsed into a note; nothing was written."""
        # The raw body ("input") may be undecodable bytes; it is never echoed back
        errors = [
            {key: value for key, value in error.items() if key != "input"}
            for error in exc.errors()
        ]
        message = _format_validation_errors(errors)
        logger.warning("[%s] Error binding JSON: %s", request_id_var.get(""), message)
        return _error_response(
            request,
            400,
            "validation_error",
            message,
            details=jsonable_encoder(errors, custom_encoder={Exception: str}),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, "not_found", exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        """Store call failed. The store's own message goes back to the caller."""
        logger.error(
            "[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(request, 500, "store_error", exc.message)

    @app.exception_handler(NotesAPIError)
    async def handle_app_error(request: Request, exc: NotesAPIError):
        logger.error(
            "[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(request, 500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace is logged server-side only."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(
            request, 500, "internal_server_error", "An unexpected error occurred."
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: A ready-made DocumentStore. When omitted, the lifespan builds
               a FirebaseStore from settings at startup.

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Notes API",
        description="CRUD service for notes stored in a Firebase Realtime Database.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=settings.cors_allow_methods_list,
        allow_headers=settings.cors_allow_headers_list,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    uvicorn.run(
        "app.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
