"""FastAPI route modules.

Exports all route modules for inclusion in the main application.
"""

from src.api.routes import chat, dashboard, leads, monitor, systems, templates, users

__all__ = [
    "chat",
    "dashboard",
    "leads",
    "monitor",
    "systems",
    "templates",
    "users",
]
