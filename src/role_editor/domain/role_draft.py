from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .selection import SelectionSet

NAME_REQUIRED = "Role name is required."
PERMISSIONS_REQUIRED = "At least one permission must be selected."


class GuardName(str, Enum):
    WEB = "web"
    API = "api"


@dataclass
class RoleDraft:
    """The in-progress role definition being composed.

    ``role_id`` is set only when the draft edits an existing role.
    ``guard_name`` is kept as a plain string; the backend decides which
    guards exist.
    """

    name: str = ""
    guard_name: str = GuardName.WEB.value
    description: str = ""
    permissions: SelectionSet = field(default_factory=SelectionSet)
    role_id: Optional[Any] = None

    @classmethod
    def from_role(cls, role: Mapping[str, Any]) -> "RoleDraft":
        return cls(
            name=role.get("name") or "",
            guard_name=role.get("guard_name") or GuardName.WEB.value,
            description=role.get("description") or "",
            permissions=SelectionSet(role.get("permissions") or ()),
            role_id=role.get("id"),
        )

    @property
    def is_edit(self) -> bool:
        return self.role_id is not None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "guard_name": self.guard_name,
            "description": self.description,
            "permissions": self.permissions.to_list(),
        }


def validate_draft(draft: RoleDraft) -> Dict[str, str]:
    """Local checks run before submission; every failing field is reported."""
    errors: Dict[str, str] = {}
    if not (draft.name or "").strip():
        errors["name"] = NAME_REQUIRED
    if not draft.permissions.to_list():
        errors["permissions"] = PERMISSIONS_REQUIRED
    return errors


def merge_errors(local: Mapping[str, str], remote: Mapping[str, Any]) -> Dict[str, str]:
    """Fold backend errors (``field -> message | [message, ...]``) into local ones.

    Only the first message of a list is kept and the backend wins when both
    sides report the same field.
    """
    merged = dict(local)
    for key, value in remote.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[0]
        if value is None:
            continue
        merged[key] = str(value)
    return merged
