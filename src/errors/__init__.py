"""Error handling framework for Salomão.

This package provides:
- Error code registry with E-XXXX format codes
- Typed domain exceptions mapped to HTTP status codes

Error categories:
- E-1xxx: Missing resources
- E-2xxx: Validation errors
- E-3xxx: Artifact generation errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors
"""

from src.errors.domain import (
    AuthenticationError,
    ConflictError,
    DomainError,
    GenerationError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Domain exceptions
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InvalidStateError",
    "AuthenticationError",
    "PersistenceError",
    "GenerationError",
]
