"""FastAPI routes for the funnel template catalogue (public)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.schemas import TemplateResponse
from src.db.connection import get_db
from src.db.models import Template
from src.services.template_service import TemplateService

router = APIRouter(prefix="/templates", tags=["templates"])


def get_template_service(db: Session = Depends(get_db)) -> TemplateService:
    """Dependency to get TemplateService instance."""
    return TemplateService(db)


@router.get("", response_model=list[TemplateResponse])
def list_templates(
    template_svc: TemplateService = Depends(get_template_service),
) -> list[Template]:
    """All templates, most used first."""
    return template_svc.list_templates()


@router.get("/popular", response_model=list[TemplateResponse])
def popular_templates(
    limit: int = Query(3, ge=1, le=50),
    template_svc: TemplateService = Depends(get_template_service),
) -> list[Template]:
    """The most used templates."""
    return template_svc.get_popular_templates(limit)
