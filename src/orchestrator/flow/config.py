"""Configuration for the Salomão flow engine and system generator.

Environment Variables:
    ANTHROPIC_MODEL: Claude model used to generate marketing systems.
        Defaults to "claude-sonnet-4-20250514".
    SALOMAO_GENERATOR_TEMPERATURE: Sampling temperature (default 0.7).
    SALOMAO_GENERATOR_TIMEOUT: Client timeout in seconds (default 30).
    SALOMAO_GENERATOR_ENABLED: Set to "false" to always use the
        template fallback (useful offline and in CI).
"""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_TOKENS = 1024


def get_model() -> str:
    """Get the Claude model to use for system generation.

    Returns:
        Claude model identifier string.

    Example:
        >>> import os
        >>> os.environ["ANTHROPIC_MODEL"] = "claude-haiku-4-5-20251001"
        >>> get_model()
        'claude-haiku-4-5-20251001'
    """
    return os.environ.get("ANTHROPIC_MODEL", DEFAULT_MODEL)


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def get_temperature() -> float:
    """Sampling temperature for generation requests."""
    return _float_env("SALOMAO_GENERATOR_TEMPERATURE", DEFAULT_TEMPERATURE)


def get_timeout() -> float:
    """Client timeout in seconds for generation requests."""
    return _float_env("SALOMAO_GENERATOR_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)


def is_generator_enabled() -> bool:
    """Return False when the language model call is switched off."""
    raw = os.environ.get("SALOMAO_GENERATOR_ENABLED", "true").strip().lower()
    return raw not in {"0", "false", "no", "off"}
