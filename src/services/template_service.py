"""Funnel template catalogue.

Built-in templates are seeded idempotently at startup. Publishing a
system increments the usage counter of the template it was based on.
"""

import json
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.db.models import Template

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES: tuple[dict, ...] = (
    {
        "id": "weight_loss_calculator",
        "category": "saude",
        "name": "Calculadora de Transformação Corporal",
        "description": "Calcula o peso ideal e mostra a transformação em 90 dias",
        "config": {
            "title": "Calculadora de Transformação Corporal",
            "subtitle": "Veja como você ficará em 90 dias",
            "buttonText": "Ver Minha Transformação",
            "fields": ["nome", "whatsapp", "peso_atual", "peso_desejado"],
        },
        "performance_score": "89",
        "conversion_rate": "89",
    },
    {
        "id": "custom_template",
        "category": "geral",
        "name": "Sistema Personalizado",
        "description": "Formulário de captação genérico com integração WhatsApp",
        "config": {
            "title": "Solução para seu público",
            "buttonText": "Quero Saber Mais",
            "fields": ["nome", "whatsapp", "email"],
        },
        "performance_score": "35",
        "conversion_rate": "35",
    },
)


class TemplateService:
    """Read and seed funnel templates.

    Args:
        db: SQLAlchemy session (sync).
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def initialize_templates(self) -> int:
        """Insert the built-in templates that are missing.

        Returns:
            Number of templates created. Does not commit; callers own the
            transaction (``get_db_context`` commits on exit).
        """
        created = 0
        for entry in BUILTIN_TEMPLATES:
            if self._db.get(Template, entry["id"]) is not None:
                continue
            self._db.add(
                Template(
                    id=entry["id"],
                    category=entry["category"],
                    name=entry["name"],
                    description=entry["description"],
                    config=json.dumps(entry["config"]),
                    performance_score=entry["performance_score"],
                    conversion_rate=entry["conversion_rate"],
                )
            )
            created += 1
        self._db.flush()
        return created

    def list_templates(self) -> list[Template]:
        """All templates, most used first."""
        return list(
            self._db.scalars(
                select(Template).order_by(Template.usage_count.desc(), Template.id)
            ).all()
        )

    def get_popular_templates(self, limit: int = 3) -> list[Template]:
        """The ``limit`` most used templates."""
        return self.list_templates()[: max(limit, 0)]

    def get_template(self, template_id: str) -> Template | None:
        return self._db.get(Template, template_id)

    def increment_usage(self, template_id: str) -> Template | None:
        """Bump the usage counter; returns None for unknown templates."""
        template = self._db.get(Template, template_id)
        if template is None:
            return None
        template.usage_count = (template.usage_count or 0) + 1
        return template
