"""Database module for Salomão state management and persistence."""

from src.db.connection import (
    SessionLocal,
    engine,
    get_db,
    get_db_context,
    init_db,
)
from src.db.models import (
    ChatMessage,
    ChatSession,
    ChatSessionStatus,
    Lead,
    LeadStatus,
    MessageRole,
    System,
    SystemStatus,
    Template,
    User,
)

__all__ = [
    # Models
    "User",
    "Template",
    "ChatSession",
    "ChatMessage",
    "System",
    "Lead",
    # Enums
    "ChatSessionStatus",
    "MessageRole",
    "SystemStatus",
    "LeadStatus",
    # Connection
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "init_db",
]
