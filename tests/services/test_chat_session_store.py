"""Tests for the SQLAlchemy-backed chat session store."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from src.db.models import ChatMessage, ChatSession
from src.errors import ConflictError, NotFoundError, PersistenceError
from src.orchestrator.flow.models import Message, SessionUpdate, SystemData
from src.services.chat_session_store import ChatSessionStore


def _msg(role: str, content: str, options: list[str] | None = None) -> Message:
    return Message(role=role, content=content, timestamp="2026-01-01T00:00:00+00:00", options=options)


class TestCreateAndLoad:
    def test_create_persists_initial_messages(self, store: ChatSessionStore, test_db: Session):
        record = store.create(None, [_msg("assistant", "Olá!")])

        assert record.current_step == 1
        assert record.status == "active"
        assert record.user_id is None
        assert [m.content for m in record.messages] == ["Olá!"]
        assert test_db.get(ChatSession, record.id) is not None

    def test_create_with_owner(self, store: ChatSessionStore, owner):
        record = store.create(owner.id, [])
        assert store.load(record.id).user_id == owner.id

    def test_load_missing_returns_none(self, store: ChatSessionStore):
        assert store.load("nope") is None

    def test_corrupted_system_data_loads_empty(self, store: ChatSessionStore, test_db: Session):
        record = store.create(None, [])
        row = test_db.get(ChatSession, record.id)
        row.system_data = "{broken"
        test_db.commit()

        assert store.load(record.id).system_data == SystemData()


class TestSave:
    def test_appends_messages_in_order(self, store: ChatSessionStore, test_db: Session):
        record = store.create(None, [_msg("assistant", "Olá!")])
        update = SessionUpdate(
            append_messages=[_msg("user", "empresários"), _msg("assistant", "Q2?", ["a", "b"])],
            current_step=2,
            system_data=SystemData(target_audience="empresários"),
            expected_step=1,
        )

        saved = store.save(record.id, update)

        assert saved.current_step == 2
        assert [m.role for m in saved.messages] == ["assistant", "user", "assistant"]
        assert saved.messages[-1].options == ["a", "b"]
        assert saved.system_data.target_audience == "empresários"
        sequences = [
            m.sequence
            for m in test_db.query(ChatMessage).filter_by(session_id=record.id).order_by(ChatMessage.sequence)
        ]
        assert sequences == [1, 2, 3]

    def test_stale_expected_step_conflicts(self, store: ChatSessionStore):
        record = store.create(None, [])
        first = SessionUpdate(current_step=2, system_data=SystemData(target_audience="a"), expected_step=1)
        store.save(record.id, first)

        with pytest.raises(ConflictError):
            store.save(record.id, first)

        reloaded = store.load(record.id)
        assert reloaded.current_step == 2
        assert reloaded.messages == []

    def test_missing_session_not_found(self, store: ChatSessionStore):
        update = SessionUpdate(current_step=2, system_data=SystemData(), expected_step=1)
        with pytest.raises(NotFoundError):
            store.save("missing", update)

    def test_unconditional_save(self, store: ChatSessionStore):
        record = store.create(None, [])
        saved = store.save(record.id, SessionUpdate(current_step=4, system_data=SystemData()))
        assert saved.current_step == 4

    def test_database_failure_raises_persistence_error(self, store: ChatSessionStore, test_db: Session):
        record = store.create(None, [])
        update = SessionUpdate(current_step=2, system_data=SystemData(), expected_step=1)

        with patch.object(test_db, "execute", side_effect=OperationalError("UPDATE", {}, Exception("locked"))):
            with pytest.raises(PersistenceError) as exc_info:
                store.save(record.id, update)

        assert exc_info.value.status_code == 500
        assert store.load(record.id).current_step == 1


class TestListing:
    def test_list_sessions_newest_first(self, store: ChatSessionStore, test_db: Session, owner):
        older = store.create(owner.id, [])
        newer = store.create(owner.id, [])
        store.create(None, [])
        test_db.get(ChatSession, older.id).created_at = "2026-01-01T00:00:00+00:00"
        test_db.get(ChatSession, newer.id).created_at = "2026-02-01T00:00:00+00:00"
        test_db.commit()

        assert [s.id for s in store.list_sessions(owner.id)] == [newer.id, older.id]

    def test_list_recent_limit(self, store: ChatSessionStore):
        for _ in range(7):
            store.create(None, [])

        recent = store.list_recent(limit=5)

        assert len(recent) == 5
        assert set(recent[0]) == {"id", "current_step", "status", "created_at"}
