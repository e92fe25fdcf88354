"""Dependency injection for FastAPI.

- providers: Singleton providers (settings, role store, role editor service)
"""

from .providers import (
    get_role_editor_service,
    get_role_store,
    get_settings,
)

__all__ = [
    "get_settings",
    "get_role_store",
    "get_role_editor_service",
]
