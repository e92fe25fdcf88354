from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

from .permission import RoleRecord

ActionType = Literal[
    "toggle_permission",
    "remove_permission",
    "select_group",
    "deselect_group",
    "toggle_group",
]


class EditorAction(BaseModel):
    """One user action to replay against the draft, in request order."""

    type: ActionType
    name: Optional[str] = None
    group: Optional[str] = None
    checked: bool = True


class RoleDraftPayload(BaseModel):
    """Role definition handed to the role backend."""

    name: str = ""
    guard_name: str = "web"
    description: str = ""
    permissions: List[str] = []


class EditorStateRequest(BaseModel):
    """Rebuilds one editor session.

    ``draft.permissions`` seeds the selection when a draft is given;
    otherwise ``role_id`` seeds it from the stored role; otherwise the
    session starts empty.
    """

    role_id: Optional[int] = None
    draft: Optional[RoleDraftPayload] = None
    search: str = ""
    active_tab: str = "all"
    actions: List[EditorAction] = []


class PermissionItem(BaseModel):
    id: Optional[int | str] = None
    name: str
    label: str
    selected: bool


class GroupSummaryResponse(BaseModel):
    group: str
    total: int
    selected: int
    is_full: bool
    is_partial: bool


class EditorStateResponse(BaseModel):
    role_id: Optional[int] = None
    draft: RoleDraftPayload
    search: str
    active_tab: str
    groups: Dict[str, List[PermissionItem]]
    summaries: Dict[str, GroupSummaryResponse]
    quick_select: List[str]
    selected_by_prefix: Dict[str, List[str]]
    selected_count: int
    errors: Dict[str, str] = {}


class ValidateDraftResponse(BaseModel):
    valid: bool
    errors: Dict[str, str] = {}


class SubmitDraftResponse(BaseModel):
    success: bool
    role: Optional[RoleRecord] = None
    errors: Dict[str, str] = {}
