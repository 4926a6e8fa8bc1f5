"""Pytest fixtures for API tests.

Provides a TestClient bound to the in-memory test database with a
deterministic artifact generator.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from src.api.dependencies import get_generator
from src.api.main import app
from src.db.connection import get_db
from tests.helpers.api import OWNER_HEADERS, answer_all, start_session
from tests.helpers.generators import StubGenerator


@pytest.fixture
def client(
    test_db: Session, stub_generator: StubGenerator, monkeypatch
) -> Generator[TestClient, None, None]:
    """Create a TestClient with overridden database and generator dependencies.

    Args:
        test_db: Test database session fixture.
        stub_generator: Deterministic generator fixture.

    Yields:
        TestClient configured for testing.
    """
    monkeypatch.delenv("SALOMAO_API_KEY", raising=False)

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: stub_generator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def completed_session(client: TestClient) -> str:
    """Session owned by owner-1 that answered all five questions."""
    session_id = start_session(client, OWNER_HEADERS)
    answer_all(client, session_id)
    return session_id
