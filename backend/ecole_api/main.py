"""
École API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handlers and provider-client lifecycle in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn ecole_api.main:app`) or `python -m ecole_api`.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware: Request ID → Upload Limit → Logging → CORS  │
    │                                                          │
    │  Routes: /api/auth  /api/users  /api/classes  /api/cours │
    │          /api/upload  /api/delete-file  /  /health       │
    │                                                          │
    │  Exception Handlers:                                     │
    │  EcoleApiError → its status │ 422 → 400 │ Exception → 500│
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → Supabase client → Drive credentials
    Shutdown: release the Supabase client handle
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecole_api import __version__
from ecole_api.config import settings
from ecole_api.database import dispose_supabase, init_supabase
from ecole_api.exceptions import EcoleApiError
from ecole_api.middleware.logging import RequestLoggingMiddleware
from ecole_api.middleware.request_id import RequestIDMiddleware, request_id_var
from ecole_api.middleware.upload_limit import UploadLimitMiddleware
from ecole_api.responses import error_body, error_response
from ecole_api.routes import auth, classes, cours, files, health, users
from ecole_api.security import enforce_route_gates
from ecole_api.services.drive_service import drive_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every HTTP exchange with the providers at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup never aborts on a provider problem: a missing or broken client
    leaves its gateway disabled (503) while the rest of the API serves.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("École API starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await init_supabase()
    except Exception as e:
        # acreate_client rejects malformed URLs/keys with its own exception type
        logger.error("Supabase client initialization failed: %s", str(e))

    await drive_service.initialize()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("École API shutting down...")
    await dispose_supabase()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses with one consistent JSON body.

    Handler hierarchy:
        EcoleApiError subclasses → exc.status_code (401/403/400/404/413/503/500)
        RequestValidationError   → 400 (missing or malformed field), after the
                                   route's auth gates had their say (401/403)
        Exception (fallback)     → 500, stack trace logged, never returned

    For 5xx errors the provider's own message stays in the logs.
    """

    @app.exception_handler(EcoleApiError)
    async def handle_app_error(request: Request, exc: EcoleApiError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid,
                type(exc).__name__,
                exc.message,
                exc.context,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        # A malformed body must not outrank the auth gates (401/403 come first)
        try:
            await enforce_route_gates(request)
        except EcoleApiError as gate_error:
            return await handle_app_error(request, gate_error)

        errors = jsonable_encoder(exc.errors())
        fields = [".".join(str(part) for part in err.get("loc", [])[1:]) for err in errors]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), fields)
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                "Champs manquants ou invalides: " + ", ".join(f for f in fields if f),
                {"errors": errors},
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", "Erreur serveur"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="École API",
        description=(
            "Backend-for-frontend for the school platform: authentication, "
            "user and role management, classes, courses and Drive file hosting."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → UploadLimit → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(UploadLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(classes.router)
    app.include_router(cours.router)
    app.include_router(files.router)
    app.include_router(health.router)

    return app


app = create_app()
