"""Published marketing systems.

Publishing turns a chat session's profile plus a freshly generated
system description into a System row owned by the caller.
"""

import json
import logging
import re
import time

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.db.models import System, SystemStatus, generate_uuid
from src.errors import NotFoundError, PersistenceError
from src.orchestrator.flow.models import GeneratedSystem, SystemData
from src.services.template_service import TemplateService

logger = logging.getLogger(__name__)


def initial_metrics() -> dict[str, int]:
    """Counters of a freshly published system."""
    return {"views": 0, "leads": 0, "conversions": 0, "conversionRate": 0}


def build_system_slug(name: str, timestamp_ms: int | None = None) -> str:
    """Lower-case the name, dash whitespace runs, suffix a ms timestamp.

    Example:
        >>> build_system_slug("Sistema Personalizado", 1700000000000)
        'sistema-personalizado-1700000000000'
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    base = re.sub(r"\s+", "-", name.lower())
    return f"{base}-{timestamp_ms}"


def load_json_field(raw: str | None, label: str, row_id: str) -> dict:
    """Decode a JSON text column, logging and returning {} when corrupted."""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Corrupted %s for %s", label, row_id)
        return {}
    return value if isinstance(value, dict) else {}


class SystemService:
    """Create and query published systems.

    Args:
        db: SQLAlchemy session (sync).
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create_from_chat(
        self,
        user_id: str,
        profile: SystemData,
        generated: GeneratedSystem,
    ) -> System:
        """Persist a System built from a generated description.

        The template is linked (and its usage counted) only when the
        generator suggested a template that exists.

        Raises:
            PersistenceError: If the insert fails.
        """
        config = generated.model_dump(by_alias=True)
        config["originalData"] = profile.to_wire()

        templates = TemplateService(self._db)
        template = templates.increment_usage(generated.template)

        system = System(
            id=generate_uuid(),
            user_id=user_id,
            template_id=template.id if template is not None else None,
            name=generated.name,
            url=build_system_slug(generated.name),
            config=json.dumps(config, ensure_ascii=False),
            status=SystemStatus.active.value,
            metrics=json.dumps(initial_metrics()),
        )
        try:
            self._db.add(system)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("[E-4001] Failed to create system for user %s: %s", user_id, e)
            raise PersistenceError("Failed to create system") from e

        self._db.refresh(system)
        logger.info("Published system %s (%s) for user %s", system.id, system.url, user_id)
        return system

    def list_user_systems(self, user_id: str) -> list[System]:
        """The user's systems, newest first."""
        return list(
            self._db.scalars(
                select(System)
                .where(System.user_id == user_id)
                .order_by(System.created_at.desc())
            ).all()
        )

    def get_system(self, system_id: str) -> System | None:
        return self._db.get(System, system_id)

    def get_user_system(self, system_id: str, user_id: str) -> System:
        """Fetch a system owned by ``user_id``.

        Raises:
            NotFoundError: If missing or owned by someone else.
        """
        system = self._db.get(System, system_id)
        if system is None or system.user_id != user_id:
            raise NotFoundError("System", system_id)
        return system
