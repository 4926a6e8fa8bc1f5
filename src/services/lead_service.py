"""Lead capture and conversion tracking.

Every capture and conversion also rewrites the owning system's JSON
metrics from COUNT queries over its lead rows, inside the same
transaction. The rewrite is a compare-and-swap on the stored metrics text
so concurrent requests cannot overwrite each other's counts.
"""

import json
import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.db.models import Lead, LeadStatus, System, generate_uuid, utc_now_iso
from src.errors import ConflictError, NotFoundError, PersistenceError
from src.services.system_service import initial_metrics, load_json_field

logger = logging.getLogger(__name__)

_METRICS_WRITE_ATTEMPTS = 3


def conversion_rate(conversions: int, leads: int) -> int:
    """Rounded percentage of converted leads, 0 when there are none."""
    if leads <= 0:
        return 0
    # Rounds half up.
    return int(conversions * 100 / leads + 0.5)


class LeadService:
    """Create, convert and list leads.

    Args:
        db: SQLAlchemy session (sync).
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _lead_counts(self, system_id: str) -> tuple[int, int]:
        leads = self._db.scalar(
            select(func.count()).select_from(Lead).where(Lead.system_id == system_id)
        )
        conversions = self._db.scalar(
            select(func.count())
            .select_from(Lead)
            .where(Lead.system_id == system_id, Lead.converted.is_(True))
        )
        return leads or 0, conversions or 0

    def _sync_metrics(self, system_id: str) -> None:
        """Rewrite the system's lead counters from its lead rows.

        Raises:
            ConflictError: If the metrics keep changing underneath us.
        """
        for _ in range(_METRICS_WRITE_ATTEMPTS):
            current = self._db.scalar(select(System.metrics).where(System.id == system_id))
            leads, conversions = self._lead_counts(system_id)
            metrics = {**initial_metrics(), **load_json_field(current, "metrics", system_id)}
            metrics["leads"] = leads
            metrics["conversions"] = conversions
            metrics["conversionRate"] = conversion_rate(conversions, leads)

            result = self._db.execute(
                update(System)
                .where(System.id == system_id, System.metrics == current)
                .values(metrics=json.dumps(metrics), updated_at=utc_now_iso())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                return
            logger.info("Metrics of system %s changed concurrently, retrying", system_id)
        raise ConflictError(f"Metrics of system '{system_id}' changed concurrently")

    def _commit_with_metrics(self, system_id: str, action: str) -> None:
        try:
            self._db.flush()
            self._sync_metrics(system_id)
            self._db.commit()
        except ConflictError:
            self._db.rollback()
            raise
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("[E-4001] Failed to %s: %s", action, e)
            raise PersistenceError(f"Failed to {action}") from e

    def capture_lead(self, system_id: str, data: dict[str, Any]) -> Lead:
        """Record a lead submitted to a published system.

        Raises:
            NotFoundError: If the system does not exist.
        """
        system = self._db.get(System, system_id)
        if system is None:
            raise NotFoundError("System", system_id)

        lead = Lead(
            id=generate_uuid(),
            system_id=system_id,
            data=json.dumps(data, ensure_ascii=False),
        )
        self._db.add(lead)
        self._commit_with_metrics(system_id, "capture lead")
        self._db.refresh(lead)
        logger.info("Captured lead %s for system %s", lead.id, system_id)
        return lead

    def convert_lead(self, lead_id: str, user_id: str) -> Lead:
        """Mark a lead as converted. Converting twice counts once.

        Raises:
            NotFoundError: If the lead is missing or its system belongs to
                another user.
        """
        lead = self._db.get(Lead, lead_id)
        if lead is None or lead.system.user_id != user_id:
            raise NotFoundError("Lead", lead_id)
        if lead.converted:
            return lead

        lead.converted = True
        lead.status = LeadStatus.converted.value
        self._commit_with_metrics(lead.system_id, "convert lead")
        self._db.refresh(lead)
        return lead

    def list_user_leads(self, user_id: str, limit: int | None = None) -> list[Lead]:
        """Leads of all systems owned by the user, newest first."""
        stmt = (
            select(Lead)
            .join(System, Lead.system_id == System.id)
            .where(System.user_id == user_id)
            .order_by(Lead.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._db.scalars(stmt).all())
