"""Schema exports for API request/response models."""

from .permission import AvailablePermissionsResponse, PermissionRecord, RoleRecord
from .role_editor import (
    EditorAction,
    EditorStateRequest,
    EditorStateResponse,
    GroupSummaryResponse,
    PermissionItem,
    RoleDraftPayload,
    SubmitDraftResponse,
    ValidateDraftResponse,
)

__all__ = [
    # Catalog and role records
    "PermissionRecord",
    "RoleRecord",
    "AvailablePermissionsResponse",
    # Editor schemas
    "EditorAction",
    "EditorStateRequest",
    "EditorStateResponse",
    "GroupSummaryResponse",
    "PermissionItem",
    "RoleDraftPayload",
    "SubmitDraftResponse",
    "ValidateDraftResponse",
]
