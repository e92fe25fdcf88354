from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class PermissionRecord(BaseModel):
    """A permission as supplied by the catalog source."""

    id: Any = None
    name: str
    group_name: Optional[str] = None


class RoleRecord(BaseModel):
    """An existing role, as handed to the editor for edit mode."""

    id: Any
    name: str
    guard_name: str = "web"
    description: Optional[str] = None
    permissions: List[str] = []
    users_count: int = 0
    updated_at: Optional[str] = None


class AvailablePermissionsResponse(BaseModel):
    """Response model for listing the (optionally filtered) permission catalog."""

    search: str = ""
    permissions: List[PermissionRecord]
    groups: Dict[str, List[PermissionRecord]]
    counts: Dict[str, int]
