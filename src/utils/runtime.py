"""Runtime environment detection for dev vs bundled mode."""

import sys


def is_bundled() -> bool:
    """Return True when running from a frozen (PyInstaller) bundle."""
    return getattr(sys, "frozen", False)
