"""Typed domain exceptions for API error mapping.

These exceptions provide stronger API contract guarantees than
string-based error message matching. Each carries a registry code
(E-XXXX) and the HTTP status it maps to, so the API layer can render
a consistent error body with a single exception handler.

Usage:
    # In service layer
    raise NotFoundError("ChatSession", session_id)

    # In the app
    @app.exception_handler(DomainError)
    async def handler(request, exc): ...
"""

from src.errors.registry import get_error

_NOT_FOUND_CODES = {
    "ChatSession": "E-1001",
    "System": "E-1002",
    "Lead": "E-1003",
    "User": "E-1004",
}


class DomainError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 400
    code: str = "E-4001"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    @property
    def remediation(self) -> str:
        """Remediation text from the error registry."""
        error_def = get_error(self.code)
        return error_def.remediation if error_def else "Contact support."


class NotFoundError(DomainError):
    """Resource was not found. Maps to HTTP 404."""

    status_code = 404

    def __init__(self, resource_type: str, identifier: str) -> None:
        super().__init__(
            f"{resource_type} '{identifier}' not found",
            code=_NOT_FOUND_CODES.get(resource_type, "E-1001"),
        )
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(DomainError):
    """Validation failure. Maps to HTTP 400."""

    status_code = 400
    code = "E-2002"


class ConflictError(DomainError):
    """Concurrent modification of the same resource. Maps to HTTP 409."""

    status_code = 409
    code = "E-2004"


class InvalidStateError(DomainError):
    """Session step is outside the question flow. Maps to HTTP 409."""

    status_code = 409
    code = "E-2003"

    def __init__(self, session_id: str, step: int) -> None:
        super().__init__(
            f"Chat session '{session_id}' is at step {step}, outside the question flow"
        )
        self.session_id = session_id
        self.step = step


class AuthenticationError(DomainError):
    """Caller identity missing. Maps to HTTP 401."""

    status_code = 401
    code = "E-5001"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class PersistenceError(DomainError):
    """Write to the database failed. Maps to HTTP 500."""

    status_code = 500
    code = "E-4001"


class GenerationError(DomainError):
    """Language model call or reply parsing failed.

    Always recovered inside the artifact generator; never reaches the API.
    """

    status_code = 502
    code = "E-3001"
