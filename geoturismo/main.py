"""
Geoturismo Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn geoturismo.main:app` or `python -m geoturismo`).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌──────────┐ ┌──────────┐ ┌───────┐ ┌──────┐       │
    │  │  Req ID  │→│ Logging  │→│ GZip  │→│ CORS │       │
    │  └──────────┘ └──────────┘ └───────┘ └──────┘       │
    │                                                      │
    │  Routes:                                             │
    │  /puntos  /usuarios  /eventos  /rutas  /categorias   │
    │  /health                                             │
    │                                                      │
    │  Exception Handlers:                                 │
    │  GeoturismoError → kind.status_code                  │
    │  RequestValidationError → 400                        │
    │  SQLAlchemyError / Exception → 500 (generic body)    │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Build the Database handle unless one was injected on app.state
    Shutdown:
    1. Dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from geoturismo import __version__
from geoturismo.config import settings
from geoturismo.database import Database
from geoturismo.exceptions import DatabaseError, ErrorKind, GeoturismoError
from geoturismo.middleware.logging import RequestLoggingMiddleware
from geoturismo.middleware.request_id import RequestIDMiddleware, request_id_var
from geoturismo.routes import categorias, eventos, health, puntos, rutas, usuarios

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Error interno del servidor"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once from the lifespan, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup builds the Database handle and stores it on `app.state.database`;
    shutdown disposes it. A handle already present on app.state (tests) is
    used as is and left for its owner to dispose.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Geoturismo Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database(settings.database_url)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Geoturismo Backend shutting down...")
    if owns_database:
        await app.state.database.dispose()
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(message: str, detalles: Optional[dict] = None) -> dict:
    body = {"error": message, "request_id": request_id_var.get("")}
    if detalles:
        body["detalles"] = detalles
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        GeoturismoError         → status from its ErrorKind
        RequestValidationError  → 400 (body/path/query failed schema validation)
        SQLAlchemyError         → 500 (wrapped as DatabaseError)
        Exception (fallback)    → 500

    INTERNAL errors never expose their context; it is logged server-side.
    """

    @app.exception_handler(GeoturismoError)
    async def handle_geoturismo_error(request: Request, exc: GeoturismoError):
        rid = request_id_var.get("")
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
            return JSONResponse(
                status_code=exc.kind.status_code,
                content=_error_body(GENERIC_SERVER_ERROR),
            )
        logger.warning("[%s] %s error: %s", rid, exc.kind.value, exc.message)
        return JSONResponse(
            status_code=exc.kind.status_code,
            content=_error_body(exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errores = [
            {
                "campo": ".".join(str(part) for part in err["loc"] if part != "body"),
                "mensaje": err["msg"],
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errores)
        return JSONResponse(
            status_code=400,
            content=_error_body("Faltan campos obligatorios", {"errores": errores}),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        return await handle_geoturismo_error(
            request, DatabaseError(context={"tipo": type(exc).__name__, "detalle": str(exc)})
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return JSONResponse(status_code=500, content=_error_body(GENERIC_SERVER_ERROR))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Geoturismo API",
        description=(
            "Points of interest, events, users and walking routes for a "
            "geotourism map. Route durations are estimated at walking speed."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS → route
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

    app.include_router(puntos.router)
    app.include_router(usuarios.router)
    app.include_router(eventos.router)
    app.include_router(rutas.router)
    app.include_router(categorias.router)
    app.include_router(health.router)

    return app


app = create_app()
