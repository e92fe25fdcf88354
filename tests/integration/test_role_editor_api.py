"""Integration tests for the role editor endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

BASE = "/api/v1/role-editor"


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.asyncio
async def test_list_permissions_grouped(test_app):
    async with _client(test_app) as http:
        resp = await http.get(f"{BASE}/permissions")
        assert resp.status_code == 200
        data = resp.json()
        assert list(data["groups"]) == ["orders", "menu", "billing", "other"]
        assert data["counts"]["orders"] == 3
        assert len(data["permissions"]) == 7


@pytest.mark.asyncio
async def test_list_permissions_filtered(test_app):
    async with _client(test_app) as http:
        resp = await http.get(f"{BASE}/permissions", params={"search": "REFUND"})
        data = resp.json()
        assert data["groups"] == {
            "billing": [{"id": 6, "name": "billing.refund", "group_name": "billing"}]
        }
        # counts describe the whole group, not the filtered slice
        assert data["counts"] == {"billing": 2}


@pytest.mark.asyncio
async def test_state_replays_billing_scenario(test_app):
    async with _client(test_app) as http:
        resp = await http.post(
            f"{BASE}/state", json={"actions": [{"type": "select_group", "group": "billing"}]}
        )
        data = resp.json()
        assert sorted(data["draft"]["permissions"]) == ["billing.refund", "billing.view"]
        assert data["quick_select"] == ["billing"]

        resp = await http.post(
            f"{BASE}/state",
            json={
                "actions": [
                    {"type": "select_group", "group": "billing"},
                    {"type": "toggle_permission", "name": "billing.refund", "checked": False},
                ]
            },
        )
        data = resp.json()
        assert data["draft"]["permissions"] == ["billing.view"]
        assert data["summaries"]["billing"]["is_partial"] is True
        assert data["quick_select"] == []


@pytest.mark.asyncio
async def test_state_for_existing_role(test_app):
    async with _client(test_app) as http:
        resp = await http.post(f"{BASE}/state", json={"role_id": 10, "search": "create"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["role_id"] == 10
        assert data["quick_select"] == ["menu"]
        assert data["summaries"]["orders"] == {
            "group": "orders",
            "total": 3,
            "selected": 2,
            "is_full": False,
            "is_partial": True,
        }
        assert list(data["groups"]) == ["orders", "menu"]
        assert data["groups"]["orders"] == [
            {"id": 1, "name": "orders.create", "label": "create", "selected": True}
        ]
        assert data["selected_by_prefix"]["orders"] == ["orders.create", "orders.update"]
        assert data["selected_count"] == 3


@pytest.mark.asyncio
async def test_state_for_missing_role_is_404(test_app):
    async with _client(test_app) as http:
        resp = await http.post(f"{BASE}/state", json={"role_id": 999})
        assert resp.status_code == 404
        assert resp.json() == {"detail": "role not found"}


@pytest.mark.asyncio
async def test_unknown_names_in_actions_are_ignored(test_app):
    async with _client(test_app) as http:
        resp = await http.post(
            f"{BASE}/state",
            json={
                "draft": {"name": "Cook", "permissions": ["menu.create"]},
                "actions": [
                    {"type": "toggle_permission", "name": "ghost.read"},
                    {"type": "deselect_group", "group": "ghost"},
                ],
            },
        )
        assert resp.status_code == 200
        assert resp.json()["draft"]["permissions"] == ["menu.create"]


@pytest.mark.asyncio
async def test_validate_reports_all_errors(test_app):
    async with _client(test_app) as http:
        resp = await http.post(f"{BASE}/validate", json={"draft": {"name": " "}})
        assert resp.status_code == 200
        assert resp.json() == {
            "valid": False,
            "errors": {
                "name": "Role name is required.",
                "permissions": "At least one permission must be selected.",
            },
        }


@pytest.mark.asyncio
async def test_submit_creates_role(test_app, role_store):
    async with _client(test_app) as http:
        resp = await http.post(
            f"{BASE}/submit",
            json={
                "draft": {"name": "Cashier", "guard_name": "web", "description": "Till"},
                "actions": [{"type": "toggle_group", "group": "billing"}],
            },
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["success"] is True
        assert data["role"]["name"] == "Cashier"
        assert sorted(data["role"]["permissions"]) == ["billing.refund", "billing.view"]
    assert any(r["name"] == "Cashier" for r in role_store.roles.values())


@pytest.mark.asyncio
async def test_submit_surfaces_backend_errors(test_app):
    async with _client(test_app) as http:
        resp = await http.post(
            f"{BASE}/submit",
            json={"draft": {"name": "Shift Manager", "permissions": ["menu.create"]}},
        )
        assert resp.status_code == 422
        assert resp.json() == {
            "success": False,
            "role": None,
            "errors": {"name": "The name has already been taken."},
        }


@pytest.mark.asyncio
async def test_submit_updates_existing_role(test_app, role_store):
    async with _client(test_app) as http:
        resp = await http.post(
            f"{BASE}/submit",
            json={"role_id": 10, "actions": [{"type": "select_group", "group": "orders"}]},
        )
        assert resp.status_code == 201
        assert resp.json()["role"]["id"] == 10
    assert "orders.delete" in role_store.roles[10]["permissions"]


@pytest.mark.asyncio
async def test_health_and_metrics(test_app):
    async with _client(test_app) as http:
        resp = await http.get("/health")
        assert resp.json() == {"status": "ok"}
        resp = await http.get("/metrics")
        assert resp.status_code == 200
        assert "http_requests_total" in resp.text
