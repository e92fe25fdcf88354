"""Singleton providers for application-wide services and clients.

This module handles lazy initialization of singleton instances like Settings
and the role store backing the editor endpoints.
"""

from ..config import Settings
from ..infrastructure.memory_role_store import InMemoryRoleStore, load_catalog_file
from ..logging_config import get_logger
from ..services.role_editor_service import RoleEditorService

logger = get_logger(__name__)

# Lazy singletons to avoid import-time side-effects
_settings: Settings | None = None
_role_store: InMemoryRoleStore | None = None


def get_settings() -> Settings:
    """Get or create singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def get_role_store() -> InMemoryRoleStore:
    """Get or create the singleton role store, seeded from the configured catalog file."""
    global _role_store
    if _role_store is None:
        s = get_settings()
        permissions = []
        if s.permission_catalog_path:
            permissions = load_catalog_file(s.permission_catalog_path)
            logger.info(
                "permission_catalog_loaded",
                extra={"path": s.permission_catalog_path, "count": len(permissions)},
            )
        _role_store = InMemoryRoleStore(permissions, guard_names=s.guard_names)
    return _role_store


def get_role_editor_service() -> RoleEditorService:
    store = get_role_store()
    return RoleEditorService(store, store, get_settings())
