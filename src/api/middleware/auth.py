"""Shared-key gate for the owner-facing API.

With SALOMAO_API_KEY unset the gate is open. With it set, ``/api/*``
requests must send the key in ``X-API-Key``; lead capture and the
monitor's health check stay open because visitors of published systems
and uptime checkers have no key. Who the caller is still comes from
``X-User-Id``.
"""

import hmac
import logging
import os
import re
import threading
import time
from collections import deque

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from src.api.schemas import ErrorResponse
from src.errors.registry import get_error

logger = logging.getLogger(__name__)

_OPEN_PREFIXES = (
    "/health",
    "/readyz",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/api/monitor/health",
)

# POST /api/systems/{id}/leads
_LEAD_CAPTURE_PATH = re.compile(r"^/api/systems/[^/]+/leads/?$")

_MIN_KEY_LENGTH = 32

INVALID_KEY_CODE = "E-5002"
LOCKED_OUT_CODE = "E-5003"


class FailedAuthLimiter:
    """Sliding-window count of rejected keys per client address.

    Addresses whose failures have all aged out are forgotten, so the
    table only holds clients that failed recently.
    """

    def __init__(self, max_failures: int = 10, window_seconds: float = 300.0, clock=time.monotonic):
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self._clock = clock
        self._failures: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, address: str, now: float) -> deque[float] | None:
        stamps = self._failures.get(address)
        if stamps is None:
            return None
        while stamps and now - stamps[0] >= self.window_seconds:
            stamps.popleft()
        if not stamps:
            del self._failures[address]
            return None
        return stamps

    def is_locked_out(self, address: str) -> bool:
        with self._lock:
            stamps = self._prune(address, self._clock())
            return stamps is not None and len(stamps) >= self.max_failures

    def record_failure(self, address: str) -> None:
        with self._lock:
            now = self._clock()
            stamps = self._prune(address, now)
            if stamps is None:
                stamps = self._failures[address] = deque()
            stamps.append(now)

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)


failed_auth = FailedAuthLimiter()


def reset_rate_limiter() -> None:
    """Forget all recorded failures."""
    failed_auth.clear()


def _get_client_ip(request: Request) -> str:
    """Client address; X-Forwarded-For only counts behind a trusted proxy."""
    trusted = os.environ.get("SALOMAO_TRUST_PROXY", "").strip().lower() in ("1", "true")
    if trusted:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def get_expected_api_key() -> str:
    """Configured key; empty means the gate is open."""
    return os.environ.get("SALOMAO_API_KEY", "").strip()


def validate_api_key_strength() -> None:
    """Refuse to start with a configured key shorter than 32 characters.

    Raises:
        ValueError: If SALOMAO_API_KEY is set but too short.
    """
    key = get_expected_api_key()
    if key and len(key) < _MIN_KEY_LENGTH:
        raise ValueError(
            f"SALOMAO_API_KEY is too short ({len(key)} chars). "
            f"Minimum length is {_MIN_KEY_LENGTH} characters."
        )


def should_authenticate(path: str, method: str = "GET") -> bool:
    """Whether the request needs the shared key."""
    if path.startswith(_OPEN_PREFIXES):
        return False
    if method.upper() == "POST" and _LEAD_CAPTURE_PATH.match(path):
        return False
    return path.startswith("/api/")


def _reject(status_code: int, code: str, message: str) -> JSONResponse:
    error_def = get_error(code)
    body = ErrorResponse(
        error_code=code,
        message=message,
        remediation=error_def.remediation if error_def else "Contact support.",
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def maybe_require_api_key(request: Request, call_next) -> Response:
    """HTTP middleware enforcing the shared key when one is configured."""
    if request.method.upper() == "OPTIONS":
        return await call_next(request)

    expected_key = get_expected_api_key()
    if not expected_key or not should_authenticate(request.url.path, request.method):
        return await call_next(request)

    address = _get_client_ip(request)
    if failed_auth.is_locked_out(address):
        logger.warning("[%s] Too many failed API key attempts from %s", LOCKED_OUT_CODE, address)
        return _reject(429, LOCKED_OUT_CODE, "Too many failed API key attempts. Try again later.")

    provided_key = request.headers.get("X-API-Key", "")
    if not provided_key or not hmac.compare_digest(provided_key, expected_key):
        failed_auth.record_failure(address)
        return _reject(401, INVALID_KEY_CODE, "Invalid or missing API key")
    return await call_next(request)
