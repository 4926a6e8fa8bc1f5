"""FastAPI routes for the Salomão questionnaire chat.

Turns for one session are serialized in-process; the store's conditional
write rejects anything that still races (409).
"""

import logging

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    get_current_user_id,
    get_flow_engine,
    get_optional_user_id,
    get_session_store,
)
from src.api.schemas import ChatMessageRequest, ChatSessionSummary
from src.errors import NotFoundError
from src.orchestrator.flow import (
    ChatSessionRecord,
    FlowEngine,
    QuestionStep,
    TurnResult,
    get_question_flow,
)
from src.services.chat_session_store import ChatSessionStore
from src.services.turn_lock import turn_locks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/start", response_model=ChatSessionRecord, response_model_exclude_none=True)
def start_chat(
    user_id: str | None = Depends(get_optional_user_id),
    engine: FlowEngine = Depends(get_flow_engine),
) -> ChatSessionRecord:
    """Start a new questionnaire session with the seed greeting."""
    return engine.start_session(user_id)


@router.get("/questions", response_model=list[QuestionStep], response_model_exclude_none=True)
def list_questions() -> list[QuestionStep]:
    """Return the static question flow."""
    return list(get_question_flow())


@router.get("/sessions", response_model=list[ChatSessionSummary])
def list_sessions(
    user_id: str = Depends(get_current_user_id),
    store: ChatSessionStore = Depends(get_session_store),
) -> list[ChatSessionSummary]:
    """List the caller's sessions, newest first."""
    return [
        ChatSessionSummary(
            id=s.id,
            current_step=s.current_step,
            status=s.status,
            created_at=s.created_at,
            message_count=len(s.messages),
        )
        for s in store.list_sessions(user_id)
    ]


@router.post(
    "/{session_id}/message",
    response_model=TurnResult,
    response_model_exclude_none=True,
)
def send_message(
    session_id: str,
    body: ChatMessageRequest | None = None,
    engine: FlowEngine = Depends(get_flow_engine),
) -> TurnResult:
    """Process one answer and return the next prompt or the final preview."""
    text = body.message if body is not None else None
    with turn_locks.hold(session_id):
        return engine.process_message(session_id, text)


@router.get("/{session_id}", response_model=ChatSessionRecord, response_model_exclude_none=True)
def get_chat_session(
    session_id: str,
    store: ChatSessionStore = Depends(get_session_store),
) -> ChatSessionRecord:
    """Return the full session record."""
    session = store.load(session_id)
    if session is None:
        raise NotFoundError("ChatSession", session_id)
    return session
