"""Unit tests for RoleEditorService."""

from unittest.mock import AsyncMock

import pytest

from role_editor.config import Settings
from role_editor.exceptions import RemoteValidationError, RoleNotFoundError
from role_editor.services.role_editor_service import RoleEditorService


@pytest.fixture
def mock_catalog_port(catalog_records, existing_role):
    """Create mock catalog port."""
    port = AsyncMock()
    port.list_permissions = AsyncMock(return_value=catalog_records)
    port.get_role = AsyncMock(side_effect=lambda rid: existing_role if rid == 10 else None)
    return port


@pytest.fixture
def mock_submission_port():
    """Create mock submission port."""
    port = AsyncMock()
    port.create_role = AsyncMock(return_value={"id": 11, "name": "Cook"})
    port.update_role = AsyncMock(return_value={"id": 10, "name": "Shift Lead"})
    return port


@pytest.fixture
def service(mock_catalog_port, mock_submission_port):
    return RoleEditorService(mock_catalog_port, mock_submission_port, Settings())


@pytest.mark.asyncio
async def test_open_session_for_new_role(service):
    session = await service.open_session()
    assert session.role_id is None
    assert session.payload()["guard_name"] == "web"
    assert session.catalog.group_names() == ["orders", "menu", "billing", "other"]


@pytest.mark.asyncio
async def test_open_session_for_existing_role(service):
    session = await service.open_session(10)
    assert session.role_id == 10
    assert session.quick_select() == {"menu"}


@pytest.mark.asyncio
async def test_open_session_for_missing_role_raises(service):
    with pytest.raises(RoleNotFoundError):
        await service.open_session(99)


@pytest.mark.asyncio
async def test_catalog_fallback_group_comes_from_settings(mock_catalog_port, mock_submission_port):
    svc = RoleEditorService(
        mock_catalog_port, mock_submission_port, Settings(fallback_group_name="misc")
    )
    catalog = await svc.load_catalog()
    assert catalog.group_of("reports.export") == "misc"


@pytest.mark.asyncio
async def test_local_errors_never_reach_the_port(service, mock_submission_port):
    session = await service.open_session()
    result = await service.submit(session)

    assert result.success is False
    assert set(result.errors) == {"name", "permissions"}
    mock_submission_port.create_role.assert_not_called()
    mock_submission_port.update_role.assert_not_called()


@pytest.mark.asyncio
async def test_create_submits_payload_and_resets(service, mock_submission_port):
    session = await service.open_session()
    session.update_details(name="Cook", description="Kitchen")
    session.select_group("menu")

    result = await service.submit(session)

    assert result.success is True
    assert result.role == {"id": 11, "name": "Cook"}
    mock_submission_port.create_role.assert_called_once_with(
        {"name": "Cook", "guard_name": "web", "description": "Kitchen", "permissions": ["menu.create"]}
    )
    assert session.payload()["name"] == ""
    assert session.selected_count() == 0


@pytest.mark.asyncio
async def test_update_keeps_session(service, mock_submission_port):
    session = await service.open_session(10)
    session.update_details(name="Shift Lead")
    session.remove_permission("menu.create")

    result = await service.submit(session)

    assert result.success is True
    args = mock_submission_port.update_role.call_args[0]
    assert args[0] == 10
    assert args[1]["permissions"] == ["orders.create", "orders.update"]
    assert session.payload()["name"] == "Shift Lead"


@pytest.mark.asyncio
async def test_remote_errors_are_merged(service, mock_submission_port):
    mock_submission_port.create_role.side_effect = RemoteValidationError(
        {"name": ["The name has already been taken."], "guard_name": "The selected guard name is invalid."}
    )
    session = await service.open_session()
    session.update_details(name="Shift Manager", guard_name="kiosk")
    session.toggle_permission("orders.create", True)

    result = await service.submit(session)

    assert result.success is False
    assert result.errors == {
        "name": "The name has already been taken.",
        "guard_name": "The selected guard name is invalid.",
    }
    assert session.errors == result.errors
    # the draft survives a rejection so the operator can fix it
    assert session.payload()["permissions"] == ["orders.create"]
