"""Data file path resolution using platformdirs.

In dev mode (not bundled), the database lives in the project root.
In bundled mode, paths use platform-appropriate directories:
  macOS: ~/Library/Application Support/ai.salomao.app/
  Linux: ~/.local/share/ai.salomao.app/
"""

from pathlib import Path

import platformdirs

from src.utils.runtime import is_bundled

_BUNDLE_ID = "ai.salomao.app"


def get_data_dir() -> Path:
    """Return the directory holding the SQLite database."""
    if is_bundled():
        return Path(platformdirs.user_data_dir(_BUNDLE_ID, appauthor=False))
    return Path(__file__).resolve().parent.parent.parent


def get_default_db_path() -> Path:
    """Return the default SQLite database file path."""
    return get_data_dir() / "salomao.db"


def ensure_data_dir() -> Path:
    """Create the data directory if needed and return it."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
