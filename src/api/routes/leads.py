"""FastAPI routes for the caller's leads."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id
from src.api.schemas import LeadResponse
from src.db.connection import get_db
from src.db.models import Lead
from src.services.lead_service import LeadService

router = APIRouter(prefix="/leads", tags=["leads"])


def get_lead_service(db: Session = Depends(get_db)) -> LeadService:
    """Dependency to get LeadService instance."""
    return LeadService(db)


@router.get("", response_model=list[LeadResponse])
def list_leads(
    user_id: str = Depends(get_current_user_id),
    lead_svc: LeadService = Depends(get_lead_service),
) -> list[Lead]:
    """All leads across the caller's systems, newest first."""
    return lead_svc.list_user_leads(user_id)


@router.get("/recent", response_model=list[LeadResponse])
def recent_leads(
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    lead_svc: LeadService = Depends(get_lead_service),
) -> list[Lead]:
    """The caller's ``limit`` most recent leads."""
    return lead_svc.list_user_leads(user_id, limit=limit)


@router.post("/{lead_id}/convert", response_model=LeadResponse)
def convert_lead(
    lead_id: str,
    user_id: str = Depends(get_current_user_id),
    lead_svc: LeadService = Depends(get_lead_service),
) -> Lead:
    """Mark a lead as converted."""
    return lead_svc.convert_lead(lead_id, user_id)
