"""
FitLog Backend - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) builds the services from the
       frozen settings, stores them on app.state, and wires middleware,
       exception handlers and routes.
Who:   `python -m app` (app/server.py) or `uvicorn app.main:app`.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                        FastAPI App                       │
    │                                                          │
    │  Middleware: Request ID → Logging → GZip → CORS          │
    │                                                          │
    │  Routes:                                                 │
    │   POST /submit   POST /analyze-image   GET /data         │
    │   POST /seed-schedule                  GET /health       │
    │                                                          │
    │  Exception Handlers:                                     │
    │   ValidationError→400 │ UploadRead/Sheets/LLM→500        │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  setup logging, refuse to start on missing configuration,
              log the route banner.
    Shutdown: log only; no pooled resources are held.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, get_settings
from app.exceptions import (
    FitLogError,
    LLMServiceError,
    SheetsServiceError,
    UploadReadError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import analyze, health, logs
from app.services.gemini_service import GeminiService
from app.services.llm_base import LLMService
from app.services.log_service import LogService
from app.services.sheets_service import SheetsService

logger = logging.getLogger(__name__)

ROUTE_BANNER = (
    ("/submit", "Saves to Google Sheets"),
    ("/analyze-image", "Sends photo to Gemini AI"),
    ("/data", "Retrieves data (Usage: /data?sheet=Logs)"),
    ("/seed-schedule", "ONE-TIME SETUP: Populates the Schedule tab"),
)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once at startup, before any other initialization logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_banner(settings: Settings) -> None:
    logger.info("-" * 48)
    logger.info("Fitness Server running on port %s", settings.port)
    for path, purpose in ROUTE_BANNER:
        logger.info("  %-15s -> %s", path, purpose)
    logger.info("-" * 48)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and validate settings.

    A ConfigurationError raised here aborts uvicorn's startup, so the
    server never accepts a connection without a spreadsheet id and API key.
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    try:
        settings.validate_required()
    except FitLogError as e:
        logger.critical("CRITICAL ERROR: %s", e.message)
        raise

    log_banner(settings)

    yield

    logger.info("Fitness Server shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # The Exception handler runs in ServerErrorMiddleware, outside
    # RequestIDMiddleware, after the ContextVar has been reset.
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_body(request: Request, error: str, message: str) -> dict:
    return {"error": error, "message": message, "request_id": _request_id(request)}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy to HTTP responses.

        ValidationError     → 400
        UploadReadError     → 500
        SheetsServiceError  → 500 (underlying detail logged, never returned)
        LLMServiceError     → 500 ("AI Error: <detail>")
        FitLogError (base)  → 500
        Exception           → 500 (traceback logged)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", exc.message),
        )

    @app.exception_handler(UploadReadError)
    async def handle_upload_read_error(request: Request, exc: UploadReadError):
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "read_error", exc.message),
        )

    @app.exception_handler(SheetsServiceError)
    async def handle_sheets_error(request: Request, exc: SheetsServiceError):
        logger.error(
            "[%s] Sheets error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "sheets_error", exc.message),
        )

    @app.exception_handler(LLMServiceError)
    async def handle_llm_error(request: Request, exc: LLMServiceError):
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "llm_service_error", f"AI Error: {exc.message}"),
        )

    @app.exception_handler(FitLogError)
    async def handle_app_error(request: Request, exc: FitLogError):
        logger.error("[%s] %s: %s", _request_id(request), type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "internal_server_error", "An unexpected error occurred."),
            headers={REQUEST_ID_HEADER: _request_id(request)},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_log_service(
    settings: Settings,
    sheets: Optional[SheetsService] = None,
    llm: Optional[LLMService] = None,
) -> LogService:
    """Wire LogService from settings; explicit collaborators win (tests)."""
    return LogService(
        sheets=sheets or SheetsService(settings.spreadsheet_id, settings.creds_file),
        llm=llm or GeminiService(settings.gemini_api_key, settings.gemini_model),
        default_sheet=settings.default_sheet,
        seed_delay_seconds=settings.seed_delay_seconds,
    )


def create_app(
    settings: Optional[Settings] = None,
    log_service: Optional[LogService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:     Frozen settings; defaults to get_settings().
        log_service:  Pre-built service (tests inject fakes here).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="FitLog API",
        description=(
            "Fitness log backend: stores workout rows in Google Sheets and reads "
            "cardio machine screens with Google Gemini."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.log_service = log_service or build_log_service(settings)

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(logs.router)
    app.include_router(analyze.router)
    app.include_router(health.router)

    return app


# `uvicorn app.main:app` entry point
app = create_app()
