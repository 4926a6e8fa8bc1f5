"""Public monitoring endpoints.

Exposes process health, static project info, a safe view of the
environment, database tables and recent questionnaire activity. Nothing
here reveals secrets or file contents.
"""

import logging
import os
import platform
import time
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from src.db.connection import get_db
from src.orchestrator.flow.config import get_model
from src.services.chat_session_store import ChatSessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/monitor", tags=["monitor"])

_started_at = time.time()

ACTIVE_FEATURES = [
    "Chat com Salomão IA",
    "Geração de sistemas personalizados",
    "Preview em tempo real",
    "Templates de conversão",
]


def get_version() -> str:
    """Installed package version, or 'unknown' in a source checkout."""
    try:
        return _pkg_version("salomao")
    except PackageNotFoundError:
        return "unknown"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


@router.get("/health")
def monitor_health() -> dict[str, Any]:
    """Liveness with uptime and version."""
    return {
        "status": "healthy",
        "timestamp": _now_iso(),
        "uptimeSeconds": int(time.time() - _started_at),
        "version": get_version(),
        "platform": "SALOMÃO.AI",
        "python": platform.python_version(),
    }


@router.get("/info")
def monitor_info() -> dict[str, Any]:
    """Static description of the service and its stack."""
    return {
        "name": "SALOMÃO.AI",
        "description": (
            "Plataforma de IA conversacional que cria sistemas automáticos "
            "de vendas inteligentes em 60 segundos"
        ),
        "version": get_version(),
        "stack": {
            "backend": "FastAPI + SQLAlchemy",
            "ai": f"Anthropic {get_model()}",
        },
        "features": [
            "Chat conversacional com IA (Salomão)",
            "Geração automática de sistemas de vendas",
            "Templates personalizáveis",
            "Dashboard com métricas",
            "Sistema de leads e conversão",
        ],
    }


@router.get("/env")
def monitor_env() -> dict[str, Any]:
    """Presence flags for configuration, never the values themselves."""
    return {
        "hasAnthropicKey": bool(os.environ.get("ANTHROPIC_API_KEY")),
        "hasDatabaseUrl": bool(os.environ.get("DATABASE_URL")),
        "hasApiKey": bool(os.environ.get("SALOMAO_API_KEY")),
        "model": get_model(),
    }


@router.get("/database")
def monitor_database(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Tables present in the connected database."""
    bind = db.get_bind()
    tables = sorted(inspect(bind).get_table_names())
    return {
        "tables": tables,
        "dialect": bind.dialect.name,
        "status": "connected",
    }


@router.get("/activity")
def monitor_activity(db: Session = Depends(get_db)) -> dict[str, Any]:
    """The five most recent chat sessions with their progress."""
    recent = ChatSessionStore(db).list_recent(limit=5)
    return {
        "timestamp": _now_iso(),
        "recentActivity": {
            "chatSessions": [
                {
                    "id": row["id"],
                    "step": row["current_step"],
                    "createdAt": row["created_at"],
                    "status": row["status"],
                }
                for row in recent
            ],
            "activeFeatures": ACTIVE_FEATURES,
        },
    }
