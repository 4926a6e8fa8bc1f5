"""FastAPI routes for published marketing systems and lead capture."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id, get_flow_engine
from src.api.schemas import (
    CreateFromChatRequest,
    LeadCreate,
    LeadResponse,
    SystemResponse,
)
from src.db.connection import get_db
from src.db.models import Lead, System
from src.errors import ValidationError
from src.orchestrator.flow import FlowEngine
from src.services.lead_service import LeadService
from src.services.system_service import SystemService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/systems", tags=["systems"])


def get_system_service(db: Session = Depends(get_db)) -> SystemService:
    """Dependency to get SystemService instance."""
    return SystemService(db)


def get_lead_service(db: Session = Depends(get_db)) -> LeadService:
    """Dependency to get LeadService instance."""
    return LeadService(db)


@router.post("/create-from-chat", response_model=SystemResponse)
def create_from_chat(
    body: CreateFromChatRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    engine: FlowEngine = Depends(get_flow_engine),
    system_svc: SystemService = Depends(get_system_service),
) -> System:
    """Publish a system from a chat session's profile.

    The generator runs again on the stored profile; completion of the
    questionnaire is not required.
    """
    session_id = body.session_id if body is not None else None
    if not session_id or not session_id.strip():
        raise ValidationError("Session id is required", code="E-2001")

    session, generated = engine.generate_for_session(session_id)
    return system_svc.create_from_chat(user_id, session.system_data, generated)


@router.get("", response_model=list[SystemResponse])
def list_systems(
    user_id: str = Depends(get_current_user_id),
    system_svc: SystemService = Depends(get_system_service),
) -> list[System]:
    """List the caller's systems, newest first."""
    return system_svc.list_user_systems(user_id)


@router.get("/{system_id}", response_model=SystemResponse)
def get_system(
    system_id: str,
    user_id: str = Depends(get_current_user_id),
    system_svc: SystemService = Depends(get_system_service),
) -> System:
    """Return one of the caller's systems (404 for anyone else's)."""
    return system_svc.get_user_system(system_id, user_id)


@router.post("/{system_id}/leads", response_model=LeadResponse, status_code=201)
def capture_lead(
    system_id: str,
    body: LeadCreate,
    lead_svc: LeadService = Depends(get_lead_service),
) -> Lead:
    """Public lead capture endpoint used by published systems."""
    return lead_svc.capture_lead(system_id, body.data)
