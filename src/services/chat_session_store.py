"""SQLAlchemy-backed session store for questionnaire chat sessions.

Implements the SessionStore protocol used by the flow engine. Every
turn is persisted with a single transaction: a conditional UPDATE of the
session row (compare-and-swap on ``current_step``) plus the INSERT of the
new message rows.
"""

import json
import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.db.models import ChatMessage, ChatSession, generate_uuid, utc_now_iso
from src.errors import ConflictError, NotFoundError, PersistenceError
from src.orchestrator.flow.models import (
    ChatSessionRecord,
    Message,
    SessionUpdate,
    SystemData,
)

logger = logging.getLogger(__name__)


def _parse_system_data(session: ChatSession) -> SystemData:
    try:
        return SystemData.model_validate(json.loads(session.system_data or "{}"))
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.warning("Corrupted system_data for chat session %s", session.id)
        return SystemData()


def _parse_options(msg: ChatMessage) -> list[str] | None:
    if not msg.options_json:
        return None
    try:
        return json.loads(msg.options_json)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Corrupted options_json for chat message %s", msg.id)
        return None


def to_record(session: ChatSession) -> ChatSessionRecord:
    """Convert an ORM row (with its messages) into a ChatSessionRecord."""
    messages = [
        Message(
            role=m.role,
            content=m.content,
            timestamp=m.created_at,
            options=_parse_options(m),
        )
        for m in session.messages
    ]
    return ChatSessionRecord(
        id=session.id,
        user_id=session.user_id,
        messages=messages,
        current_step=session.current_step,
        system_data=_parse_system_data(session),
        status=session.status,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


class ChatSessionStore:
    """Durable storage for chat sessions.

    Args:
        db: SQLAlchemy session (sync).
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _message_row(self, session_id: str, message: Message, sequence: int) -> ChatMessage:
        return ChatMessage(
            id=generate_uuid(),
            session_id=session_id,
            role=message.role,
            content=message.content,
            options_json=json.dumps(message.options) if message.options else None,
            sequence=sequence,
            created_at=message.timestamp,
        )

    def create(
        self, user_id: str | None, messages: list[Message]
    ) -> ChatSessionRecord:
        """Create a session at step 1 with an empty profile.

        Args:
            user_id: Optional owner (must reference an existing user).
            messages: Initial messages, typically the greeting.

        Returns:
            The created session.

        Raises:
            PersistenceError: If the insert fails.
        """
        session = ChatSession(
            id=generate_uuid(),
            user_id=user_id,
            current_step=1,
            system_data="{}",
        )
        try:
            self._db.add(session)
            self._db.flush()
            for index, message in enumerate(messages, start=1):
                self._db.add(self._message_row(session.id, message, index))
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("[E-4001] Failed to create chat session: %s", e)
            raise PersistenceError("Failed to create chat session") from e

        self._db.refresh(session)
        return to_record(session)

    def load(self, session_id: str) -> ChatSessionRecord | None:
        """Load a session with its messages, or None if it does not exist."""
        session = self._db.get(ChatSession, session_id)
        if session is None:
            return None
        return to_record(session)

    def save(self, session_id: str, update_: SessionUpdate) -> ChatSessionRecord:
        """Apply a turn update in one transaction.

        When ``update_.expected_step`` is set the row is only updated if its
        stored step still matches, so two turns racing on the same session
        cannot both succeed.

        Raises:
            NotFoundError: If the session does not exist.
            ConflictError: If the stored step no longer matches.
            PersistenceError: If the write fails.
        """
        stmt = update(ChatSession).where(ChatSession.id == session_id)
        if update_.expected_step is not None:
            stmt = stmt.where(ChatSession.current_step == update_.expected_step)
        stmt = stmt.values(
            current_step=update_.current_step,
            system_data=json.dumps(update_.system_data.to_wire()),
            updated_at=utc_now_iso(),
        ).execution_options(synchronize_session=False)

        try:
            result = self._db.execute(stmt)
            if result.rowcount == 0:
                self._db.rollback()
                if self._db.get(ChatSession, session_id) is None:
                    raise NotFoundError("ChatSession", session_id)
                raise ConflictError(
                    f"Chat session '{session_id}' was modified by another turn"
                )

            max_seq = self._db.execute(
                select(func.max(ChatMessage.sequence)).where(
                    ChatMessage.session_id == session_id
                )
            ).scalar()
            next_seq = (max_seq or 0) + 1
            for offset, message in enumerate(update_.append_messages):
                self._db.add(self._message_row(session_id, message, next_seq + offset))
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("[E-4001] Failed to save chat session %s: %s", session_id, e)
            raise PersistenceError("Failed to save chat session") from e

        # Bulk UPDATE bypassed the identity map.
        self._db.expire_all()
        record = self.load(session_id)
        if record is None:
            raise NotFoundError("ChatSession", session_id)
        return record

    def list_sessions(self, user_id: str) -> list[ChatSessionRecord]:
        """Return the user's sessions, newest first."""
        rows = self._db.scalars(
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(ChatSession.created_at.desc())
        ).all()
        return [to_record(row) for row in rows]

    def list_recent(self, limit: int = 5) -> list[dict[str, Any]]:
        """Lightweight summaries of the most recently created sessions."""
        rows = self._db.execute(
            select(
                ChatSession.id,
                ChatSession.current_step,
                ChatSession.status,
                ChatSession.created_at,
            )
            .order_by(ChatSession.created_at.desc())
            .limit(limit)
        ).all()
        return [
            {
                "id": row[0],
                "current_step": row[1],
                "status": row[2],
                "created_at": row[3],
            }
            for row in rows
        ]
