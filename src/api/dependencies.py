"""Shared FastAPI dependencies for caller identity and the flow engine.

The caller's identity arrives in the ``X-User-Id`` header, set by the
authenticating proxy in front of the API. Every identified request
upserts the matching User row so foreign keys from sessions and systems
always resolve.
"""

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from src.db.connection import get_db
from src.errors import AuthenticationError
from src.orchestrator.flow import AnthropicSystemGenerator, FlowEngine, SystemGenerator
from src.services.chat_session_store import ChatSessionStore
from src.services.user_service import UserService

_generator = AnthropicSystemGenerator()


def get_generator() -> SystemGenerator:
    """Process-wide artifact generator (overridden in tests)."""
    return _generator


def get_session_store(db: Session = Depends(get_db)) -> ChatSessionStore:
    """Dependency to get ChatSessionStore instance."""
    return ChatSessionStore(db)


def get_flow_engine(
    store: ChatSessionStore = Depends(get_session_store),
    generator: SystemGenerator = Depends(get_generator),
) -> FlowEngine:
    """Dependency to get a FlowEngine bound to the request's DB session."""
    return FlowEngine(store, generator)


def get_optional_user_id(
    x_user_id: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> str | None:
    """Return the caller's id when identified, upserting the user row."""
    if x_user_id is None or not x_user_id.strip():
        return None
    user_id = x_user_id.strip()
    UserService(db).upsert_user(user_id)
    return user_id


def get_current_user_id(
    user_id: str | None = Depends(get_optional_user_id),
) -> str:
    """Return the caller's id.

    Raises:
        AuthenticationError: If the request carries no identity.
    """
    if user_id is None:
        raise AuthenticationError()
    return user_id
