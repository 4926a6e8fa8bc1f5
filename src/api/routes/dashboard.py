"""FastAPI route for dashboard metrics."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id
from src.api.schemas import DashboardMetricsResponse
from src.db.connection import get_db
from src.services.dashboard_service import DashboardMetrics, DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=DashboardMetricsResponse)
def get_dashboard_metrics(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> DashboardMetrics:
    """Lead, conversion and revenue figures for the caller."""
    return DashboardService(db).get_metrics(user_id)
