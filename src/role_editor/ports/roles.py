from typing import Any, Dict, List, Optional, Protocol


class PermissionCatalogPort(Protocol):
    """Source of the permission catalog and of existing roles to edit."""

    async def list_permissions(self) -> List[Dict[str, Any]]: ...

    async def get_role(self, role_id: Any) -> Optional[Dict[str, Any]]: ...


class RoleSubmissionPort(Protocol):
    """Persists finished drafts.

    Implementations raise ``RemoteValidationError`` for field-level
    rejections and ``RoleNotFoundError`` when updating a missing role.
    """

    async def create_role(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...

    async def update_role(self, role_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]: ...
