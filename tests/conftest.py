"""Root-level pytest fixtures for all tests.

Provides shared fixtures including:
- In-memory SQLite database with seeded templates
- Session store and flow engine wired to that database
- Deterministic artifact generators
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

# Point the application engine at a throwaway database and keep the
# generator offline before any src.db import creates the engine.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="salomao-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{Path(_TEST_DB_DIR) / 'test.db'}")
os.environ.setdefault("SALOMAO_GENERATOR_ENABLED", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.db.models import Base, User
from src.orchestrator.flow import FlowEngine
from src.services.chat_session_store import ChatSessionStore
from src.services.template_service import TemplateService
from tests.helpers.generators import StubGenerator


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


@pytest.fixture
def test_db() -> Generator[Session, None, None]:
    """Create an in-memory SQLite database for testing.

    Creates all tables, seeds the built-in templates, yields a session,
    and cleans up after the test.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    TemplateService(session).initialize_templates()
    session.commit()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(test_db: Session) -> ChatSessionStore:
    """ChatSessionStore bound to the test database."""
    return ChatSessionStore(test_db)


@pytest.fixture
def stub_generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def engine(store: ChatSessionStore, stub_generator: StubGenerator) -> FlowEngine:
    """FlowEngine with a deterministic generator."""
    return FlowEngine(store, stub_generator)


@pytest.fixture
def owner(test_db: Session) -> User:
    """A persisted user owning sessions and systems."""
    user = User(id="owner-1", email="dono@example.com", business_name="Clínica Bela")
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user
