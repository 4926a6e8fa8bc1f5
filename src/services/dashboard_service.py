"""Dashboard metrics derived from a user's systems and leads.

Environment Variables:
    SALOMAO_AVG_TICKET: Average ticket in R$ used for projected revenue
        (default 850).
"""

import logging
import os
from datetime import UTC, date, datetime

from pydantic import BaseModel
from sqlalchemy.orm import Session

from src.db.models import SystemStatus
from src.services.lead_service import LeadService, conversion_rate
from src.services.system_service import SystemService

logger = logging.getLogger(__name__)

DEFAULT_AVG_TICKET = 850.0
AVERAGE_RATING = 4.8


def get_avg_ticket() -> float:
    """Average ticket (R$) from SALOMAO_AVG_TICKET."""
    raw = os.environ.get("SALOMAO_AVG_TICKET", "").strip()
    if not raw:
        return DEFAULT_AVG_TICKET
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid SALOMAO_AVG_TICKET=%r", raw)
        return DEFAULT_AVG_TICKET


class DashboardMetrics(BaseModel):
    """Aggregated numbers shown on the owner's dashboard."""

    leads_today: int
    total_leads: int
    conversion_rate: int
    projected_revenue: int
    active_systems: int
    average_rating: float


class DashboardService:
    """Compute dashboard metrics.

    Args:
        db: SQLAlchemy session (sync).
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_metrics(self, user_id: str, today: date | None = None) -> DashboardMetrics:
        """Metrics for ``user_id``; ``today`` defaults to the current UTC date."""
        today = today or datetime.now(UTC).date()
        systems = SystemService(self._db).list_user_systems(user_id)
        leads = LeadService(self._db).list_user_leads(user_id)

        today_prefix = today.isoformat()
        leads_today = sum(1 for lead in leads if lead.created_at.startswith(today_prefix))
        conversions = sum(1 for lead in leads if lead.converted)
        revenue = conversions * get_avg_ticket()

        return DashboardMetrics(
            leads_today=leads_today,
            total_leads=len(leads),
            conversion_rate=conversion_rate(conversions, len(leads)),
            projected_revenue=int(revenue / 1000 + 0.5),
            active_systems=sum(
                1 for s in systems if s.status == SystemStatus.active.value
            ),
            average_rating=AVERAGE_RATING,
        )
