import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import RemoteValidationError, RoleNotFoundError
from ..logging_config import get_logger

logger = get_logger(__name__)

NAME_TAKEN = "The name has already been taken."
NAME_REQUIRED = "The name field is required."
GUARD_INVALID = "The selected guard name is invalid."
PERMISSIONS_INVALID = "The selected permissions are invalid."


def load_catalog_file(path: str | Path) -> List[Dict[str, Any]]:
    """Read ``[{id, name, group_name}, ...]`` permission records from JSON."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("permissions", [])
    if not isinstance(data, list):
        raise ValueError(f"permission catalog in {path} must be a list of records")
    return [dict(r) for r in data]


class InMemoryRoleStore:
    """Role backend kept in process memory.

    Implements both the catalog and the submission port and answers with
    the same field-keyed errors a real role API would send back.
    """

    def __init__(
        self,
        permissions: Optional[Iterable[Dict[str, Any]]] = None,
        roles: Optional[Iterable[Dict[str, Any]]] = None,
        guard_names: Iterable[str] = ("web", "api"),
    ):
        self.permissions: List[Dict[str, Any]] = [dict(p) for p in permissions or ()]
        self.guard_names = list(guard_names)
        self.roles: Dict[Any, Dict[str, Any]] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()
        for role in roles or ():
            record = self._record(role.get("id") or self._allocate_id(), role)
            self.roles[record["id"]] = record
            self._next_id = max(self._next_id, int(record["id"]) + 1)

    def _allocate_id(self) -> int:
        rid = self._next_id
        self._next_id += 1
        return rid

    def _record(self, role_id: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": role_id,
            "name": data.get("name", ""),
            "guard_name": data.get("guard_name") or "web",
            "description": data.get("description") or "",
            "permissions": list(dict.fromkeys(data.get("permissions") or [])),
            "users_count": data.get("users_count", 0),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

    def _check(self, payload: Dict[str, Any], role_id: Any = None) -> None:
        errors: Dict[str, List[str]] = {}
        name = (payload.get("name") or "").strip()
        if not name:
            errors.setdefault("name", []).append(NAME_REQUIRED)
        elif any(r["name"] == name and r["id"] != role_id for r in self.roles.values()):
            errors.setdefault("name", []).append(NAME_TAKEN)
        if payload.get("guard_name") not in self.guard_names:
            errors.setdefault("guard_name", []).append(GUARD_INVALID)
        known = {p.get("name") for p in self.permissions}
        unknown = [n for n in payload.get("permissions") or [] if n not in known]
        if unknown:
            errors.setdefault("permissions", []).append(PERMISSIONS_INVALID)
        if errors:
            logger.info("role_payload_rejected", extra={"fields": sorted(errors), "role_id": role_id})
            raise RemoteValidationError(errors)

    async def list_permissions(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self.permissions]

    async def get_role(self, role_id: Any) -> Optional[Dict[str, Any]]:
        role = self.roles.get(role_id)
        return dict(role) if role else None

    async def create_role(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            self._check(payload)
            record = self._record(self._allocate_id(), payload)
            self.roles[record["id"]] = record
        logger.info("role_created", extra={"role_id": record["id"], "name": record["name"]})
        return dict(record)

    async def update_role(self, role_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            existing = self.roles.get(role_id)
            if existing is None:
                raise RoleNotFoundError(role_id)
            self._check(payload, role_id=role_id)
            record = self._record(role_id, payload)
            record["users_count"] = existing.get("users_count", 0)
            self.roles[role_id] = record
        logger.info("role_updated", extra={"role_id": role_id, "name": record["name"]})
        return dict(record)
