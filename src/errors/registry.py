"""Error code registry with E-XXXX format codes.

This module defines the error code system for Salomão, organizing errors
into categories:
- E-1xxx: Missing resources (sessions, systems, leads)
- E-2xxx: Validation errors
- E-3xxx: Artifact generation errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    NOT_FOUND = "not_found"  # E-1xxx
    VALIDATION = "validation"  # E-2xxx
    GENERATION = "generation"  # E-3xxx
    SYSTEM = "system"  # E-4xxx
    AUTH = "auth"  # E-5xxx


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Not found (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.NOT_FOUND,
        title="Chat Session Not Found",
        message_template="Chat session '{identifier}' not found.",
        remediation="Start a new chat session and try again.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.NOT_FOUND,
        title="System Not Found",
        message_template="System '{identifier}' not found.",
        remediation="Check the system id or publish the system from a completed chat.",
    ),
    "E-1003": ErrorCode(
        code="E-1003",
        category=ErrorCategory.NOT_FOUND,
        title="Lead Not Found",
        message_template="Lead '{identifier}' not found.",
        remediation="Check the lead id and retry.",
    ),
    "E-1004": ErrorCode(
        code="E-1004",
        category=ErrorCategory.NOT_FOUND,
        title="User Not Found",
        message_template="User '{identifier}' not found.",
        remediation="Sign in again to recreate your profile.",
    ),
    # Validation (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Missing Session Id",
        message_template="Session ID is required.",
        remediation="Pass the id returned by the chat start endpoint.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="Missing Message",
        message_template="Message is required.",
        remediation="Send a non-empty answer to the current question.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Invalid Session State",
        message_template="Chat session '{identifier}' is at step {step}, outside the question flow.",
        remediation="Start a new chat session; this one cannot accept more answers.",
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.VALIDATION,
        title="Concurrent Turn",
        message_template="Chat session '{identifier}' was updated by another request.",
        remediation="Reload the session and send the answer again.",
        is_retryable=True,
    ),
    # Generation (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.GENERATION,
        title="Generation Failed",
        message_template="The language model could not generate a system: {details}",
        remediation="A template-based system was used instead. No action needed.",
        is_retryable=True,
    ),
    # System (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Database Error",
        message_template="Database operation failed: {details}",
        remediation="This is a system error. Retry the operation. Contact support if issue persists.",
        is_retryable=True,
    ),
    # Auth (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="Authentication Required",
        message_template="This operation requires an authenticated user.",
        remediation="Sign in and retry the request.",
    ),
    "E-5002": ErrorCode(
        code="E-5002",
        category=ErrorCategory.AUTH,
        title="Invalid API Key",
        message_template="The X-API-Key header is missing or does not match.",
        remediation="Send the configured SALOMAO_API_KEY in the X-API-Key header.",
    ),
    "E-5003": ErrorCode(
        code="E-5003",
        category=ErrorCategory.AUTH,
        title="Too Many Failed Attempts",
        message_template="Too many failed API key attempts from this address.",
        remediation="Wait a few minutes before retrying with the correct key.",
        is_retryable=True,
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
