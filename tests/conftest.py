import sys
from pathlib import Path

# Ensure the project's src directory is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import pytest

from role_editor.config import Settings
from role_editor.domain.permission import PermissionCatalog
from role_editor.infrastructure.memory_role_store import InMemoryRoleStore
from role_editor.services.role_editor_service import RoleEditorService

CATALOG_RECORDS = [
    {"id": 1, "name": "orders.create", "group_name": "orders"},
    {"id": 2, "name": "orders.update", "group_name": "orders"},
    {"id": 3, "name": "orders.delete", "group_name": "orders"},
    {"id": 4, "name": "menu.create", "group_name": "menu"},
    {"id": 5, "name": "billing.view", "group_name": "billing"},
    {"id": 6, "name": "billing.refund", "group_name": "billing"},
    {"id": 7, "name": "reports.export", "group_name": None},
]

EXISTING_ROLE = {
    "id": 10,
    "name": "Shift Manager",
    "guard_name": "web",
    "description": "Runs the floor",
    "permissions": ["orders.create", "orders.update", "menu.create"],
    "users_count": 3,
    "updated_at": "2024-05-01T10:00:00+00:00",
}


@pytest.fixture
def catalog_records():
    return [dict(r) for r in CATALOG_RECORDS]


@pytest.fixture
def catalog(catalog_records):
    return PermissionCatalog.from_records(catalog_records)


@pytest.fixture
def existing_role():
    return dict(EXISTING_ROLE)


@pytest.fixture
def role_store(catalog_records, existing_role):
    return InMemoryRoleStore(catalog_records, roles=[existing_role])


@pytest.fixture
def editor_service(role_store):
    return RoleEditorService(role_store, role_store, Settings())


@pytest.fixture
def test_app(editor_service):
    """App wired against a fresh in-memory role store for each test."""
    from role_editor.deps import get_role_editor_service
    from role_editor.wiring import create_app

    app = create_app()
    app.dependency_overrides[get_role_editor_service] = lambda: editor_service
    yield app
    app.dependency_overrides.clear()
