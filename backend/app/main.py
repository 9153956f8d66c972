"""
Back Office API - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       the module-level `app` is what uvicorn serves (uvicorn app.main:app).

Application Architecture:
    ┌────────────────────────────────────────────────────────────┐
    │                        FastAPI App                         │
    │                                                            │
    │  Middleware:  Rate Limit → Request ID → Access Log → GZip  │
    │               → CORS                                       │
    │                                                            │
    │  Routes:      /api/practiceInformation  (GET, PUT)         │
    │               /api/upload               (POST)             │
    │               /api/blobs/{c}/{name}     (GET)              │
    │               /api/templates[/preview]  (GET)              │
    │               /health                   (GET)              │
    │                                                            │
    │  Exception handlers (body: {"error", "details"?}):         │
    │      UnauthenticatedError   → 401                          │
    │      NotFoundError          → 404                          │
    │      InvalidPayloadError    → 422                          │
    │      RequestValidationError → 422                          │
    │      UploadValidationError  → 400                          │
    │      StorageError           → 400 / 500 by FailureKind     │
    │      PersistenceError       → 500 (generic message)        │
    │      Exception              → 500                          │
    └────────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    BackOfficeError,
    FailureKind,
    InvalidPayloadError,
    NotFoundError,
    PersistenceError,
    StorageError,
    UnauthenticatedError,
    UploadValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import blobs, health, practice_information, templates, upload

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:   logging, configuration check, storage probe.
    Shutdown:  dispose the database engine.
    """
    setup_logging()
    logger.info("Back Office API %s starting up", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health stays reachable and every session resolves
        # to None, so protected routes answer 401
        logger.error("Configuration error: %s", e)

    from app.services.blob_storage import blob_storage
    if not await blob_storage.health_check():
        logger.warning("Blob storage at %s is not writable", settings.storage_root)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Back Office API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# FailureKind → (status, error, details) for blob storage failures
STORAGE_ERROR_RESPONSES: Dict[FailureKind, Tuple[int, str, str]] = {
    FailureKind.INVALID_URL: (
        400,
        "Invalid blob URL",
        "The provided URL is not properly formatted",
    ),
    FailureKind.NOT_FOUND: (
        500,
        "Storage configuration error",
        "Upload destination not found",
    ),
    FailureKind.AUTH_FAILURE: (
        500,
        "Storage authentication error",
        "Failed to authenticate with storage provider",
    ),
}
STORAGE_ERROR_FALLBACK: Tuple[int, str, str] = (500, "Internal server error", "Failed to upload file")


def error_response(status_code: int, error: str, details: Optional[Any] = None) -> JSONResponse:
    """{"error": ..., "details"?: ...}; details is left out when None."""
    content: Dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the shared error body.

    `context` on BackOfficeError is logged here and never returned.
    """

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        logger.info("[%s] Unauthenticated %s %s", request_id_var.get(""), request.method, request.url.path)
        return error_response(401, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("[%s] %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(404, exc.message)

    @app.exception_handler(InvalidPayloadError)
    async def handle_invalid_payload(request: Request, exc: InvalidPayloadError):
        logger.warning("[%s] Invalid payload: %d problem(s)", request_id_var.get(""), len(exc.details))
        return error_response(422, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())) or "body",
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), details)
        return error_response(422, InvalidPayloadError.default_message, details)

    @app.exception_handler(UploadValidationError)
    async def handle_upload_validation(request: Request, exc: UploadValidationError):
        logger.warning("[%s] Upload rejected: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(400, exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        status_code, error, details = STORAGE_ERROR_RESPONSES.get(exc.kind, STORAGE_ERROR_FALLBACK)
        logger.error(
            "[%s] Storage error (%s): %s | Context: %s",
            request_id_var.get(""),
            exc.kind.value,
            exc.message,
            exc.context,
        )
        return error_response(status_code, error, details)

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        # The service already replaced the cause with a generic message
        logger.error("[%s] %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(500, exc.message)

    @app.exception_handler(BackOfficeError)
    async def handle_back_office_error(request: Request, exc: BackOfficeError):
        logger.error("[%s] Unhandled %s: %s | Context: %s", request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
        return error_response(500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        response = error_response(500, "Internal server error")
        # Errors reaching this handler bypass the request ID middleware
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Back Office API",
        description=(
            "Administrative back-office API: clinician practice information, "
            "image uploads and questionnaire template previews."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(practice_information.router)
    app.include_router(upload.router)
    app.include_router(blobs.router)
    app.include_router(templates.router)
    app.include_router(health.router)

    return app


app = create_app()
