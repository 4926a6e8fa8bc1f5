"""Service layer for Salomão.

Provides persistence and business operations around the questionnaire:
chat session storage, published systems, leads, templates, users and
dashboard metrics.
"""

from src.services.chat_session_store import ChatSessionStore
from src.services.dashboard_service import DashboardMetrics, DashboardService
from src.services.lead_service import LeadService
from src.services.system_service import SystemService
from src.services.template_service import TemplateService
from src.services.turn_lock import TurnLockRegistry, turn_locks
from src.services.user_service import UserService

__all__ = [
    "ChatSessionStore",
    "DashboardMetrics",
    "DashboardService",
    "LeadService",
    "SystemService",
    "TemplateService",
    "TurnLockRegistry",
    "turn_locks",
    "UserService",
]
