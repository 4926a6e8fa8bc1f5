"""Tests for typed domain exceptions and their HTTP mapping."""

import pytest

from src.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    GenerationError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc,status,code",
    [
        (NotFoundError("ChatSession", "abc"), 404, "E-1001"),
        (NotFoundError("System", "abc"), 404, "E-1002"),
        (NotFoundError("Lead", "abc"), 404, "E-1003"),
        (NotFoundError("User", "abc"), 404, "E-1004"),
        (ValidationError("Message is required"), 400, "E-2002"),
        (ValidationError("Session id is required", code="E-2001"), 400, "E-2001"),
        (InvalidStateError("abc", 7), 409, "E-2003"),
        (ConflictError("raced"), 409, "E-2004"),
        (GenerationError("bad json"), 502, "E-3001"),
        (PersistenceError("write failed"), 500, "E-4001"),
        (AuthenticationError(), 401, "E-5001"),
    ],
)
def test_status_and_code(exc, status, code):
    assert isinstance(exc, DomainError)
    assert exc.status_code == status
    assert exc.code == code


def test_not_found_message_names_resource():
    exc = NotFoundError("System", "sys-1")
    assert exc.message == "System 'sys-1' not found"
    assert exc.resource_type == "System"
    assert exc.identifier == "sys-1"


def test_invalid_state_keeps_step():
    exc = InvalidStateError("abc", 6)
    assert exc.step == 6
    assert "step 6" in str(exc)


def test_remediation_comes_from_registry():
    assert NotFoundError("ChatSession", "x").remediation == "Start a new chat session and try again."


def test_unregistered_code_has_generic_remediation():
    assert DomainError("odd", code="E-9999").remediation == "Contact support."


def test_code_override_does_not_leak_to_class():
    ValidationError("blank id", code="E-2001")
    assert ValidationError.code == "E-2002"
