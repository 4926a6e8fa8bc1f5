"""FastAPI application for the Salomão API.

Provides the main application instance with routers, middleware,
and exception handlers configured.
"""

import logging
import os
import sys
import time as _time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request

# Configure logging to stdout for uvicorn to capture
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
# Ensure our application loggers are captured
logging.getLogger("src").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.middleware.auth import maybe_require_api_key, validate_api_key_strength
from src.api.routes import chat, dashboard, leads, monitor, systems, templates, users
from src.api.routes.monitor import get_version
from src.api.schemas import ErrorResponse
from src.db.connection import init_db
from src.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)

_startup_time: float = 0.0


def _parse_allowed_origins() -> list[str]:
    """Parse comma-separated CORS allowlist from ALLOWED_ORIGINS env var."""
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate configuration, create tables, seed templates."""
    global _startup_time

    _startup_time = _time.time()
    validate_api_key_strength()
    init_db()

    if not os.environ.get("ANTHROPIC_API_KEY"):
        logger.warning(
            "ANTHROPIC_API_KEY is not set; generated systems will use the "
            "fallback template."
        )

    yield

    from src.db.connection import close_db

    close_db()


app = FastAPI(
    title="Salomão API",
    description="Conversational builder for lead-capture marketing systems",
    version="0.1.0",
    lifespan=lifespan,
)

# Optional API auth for /api/* when SALOMAO_API_KEY is configured.
app.middleware("http")(maybe_require_api_key)

# CORS allowlist is env-driven. If unset, CORS is disabled (same-origin only).
allowed_origins = _parse_allowed_origins()
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key", "X-User-Id"],
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render DomainError exceptions with a consistent body.

    Args:
        request: The incoming request.
        exc: The DomainError exception.

    Returns:
        JSONResponse with the error's status code and registry details.
    """
    if isinstance(exc, PersistenceError):
        logger.error("[%s] %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    body = ErrorResponse(
        error_code=exc.code,
        message=exc.message,
        remediation=exc.remediation,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# Include routers
app.include_router(chat.router, prefix="/api")
app.include_router(systems.router, prefix="/api")
app.include_router(leads.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(templates.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(monitor.router, prefix="/api")


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint with uptime and version."""
    uptime = int(_time.time() - _startup_time) if _startup_time else 0
    return {
        "status": "healthy",
        "version": get_version(),
        "uptime_seconds": uptime,
    }


@app.get("/readyz")
def readiness_check():
    """Dependency-aware readiness check for local/container deployments."""
    from sqlalchemy import text

    from src.db.connection import get_db_context

    uptime = int(_time.time() - _startup_time) if _startup_time else 0
    checks: dict[str, dict[str, Any]] = {}

    try:
        with get_db_context() as db:
            db.execute(text("SELECT 1"))
        checks["database"] = {"status": "ok"}
    except Exception as exc:
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "uptime_seconds": uptime,
                "checks": {
                    "database": {"status": "error", "message": str(exc)},
                },
            },
        )

    if os.environ.get("ANTHROPIC_API_KEY"):
        checks["anthropic"] = {"status": "configured"}
        status = "ready"
    else:
        checks["anthropic"] = {
            "status": "degraded",
            "message": "ANTHROPIC_API_KEY missing, fallback generation only",
        }
        status = "degraded"

    return {
        "status": status,
        "uptime_seconds": uptime,
        "checks": checks,
    }


@app.get("/api")
def api_root() -> dict:
    """API root with links to docs."""
    return {
        "name": "Salomão API",
        "version": "0.1.0",
        "docs": "/docs",
        "redoc": "/redoc",
    }
