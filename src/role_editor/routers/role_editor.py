from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_role_editor_service
from ..domain.permission import PermissionCatalog
from ..domain.search import project
from ..domain.selection import permission_label
from ..logging_config import get_logger
from ..schemas.permission import AvailablePermissionsResponse, PermissionRecord
from ..schemas.role_editor import (
    EditorAction,
    EditorStateRequest,
    EditorStateResponse,
    GroupSummaryResponse,
    PermissionItem,
    RoleDraftPayload,
    SubmitDraftResponse,
    ValidateDraftResponse,
)
from ..services.role_editor_service import RoleEditorService, RoleEditorSession

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/role-editor", tags=["role-editor"])


def _record(p) -> PermissionRecord:
    return PermissionRecord(id=p.id, name=p.name, group_name=p.group_name)


def apply_action(session: RoleEditorSession, action: EditorAction) -> bool:
    if action.type == "toggle_permission":
        return session.toggle_permission(action.name or "", action.checked)
    if action.type == "remove_permission":
        return session.remove_permission(action.name or "")
    if action.type == "select_group":
        return session.select_group(action.group or "")
    if action.type == "deselect_group":
        return session.deselect_group(action.group or "")
    if action.type == "toggle_group":
        return session.toggle_group(action.group or "")
    return False


async def _session_for(body: EditorStateRequest, service: RoleEditorService) -> RoleEditorSession:
    if body.draft is not None:
        session = await service.open_draft(body.draft.model_dump(), role_id=body.role_id)
    else:
        session = await service.open_session(body.role_id)
    session.set_search(body.search)
    session.set_active_tab(body.active_tab)
    for action in body.actions:
        apply_action(session, action)
    return session


def _state_response(session: RoleEditorSession) -> EditorStateResponse:
    state = session.display_state()
    groups = {
        g: [
            PermissionItem(
                id=p.id, name=p.name, label=permission_label(p.name), selected=p.name in state.selected
            )
            for p in perms
        ]
        for g, perms in state.groups.items()
    }
    return EditorStateResponse(
        role_id=session.role_id,
        draft=RoleDraftPayload(**state.draft),
        search=state.search,
        active_tab=state.active_tab,
        groups=groups,
        summaries={g: GroupSummaryResponse(**s.to_dict()) for g, s in state.summaries.items()},
        # chips in catalog order so clients render them stably
        quick_select=[g for g in session.catalog.group_names() if g in state.quick_select],
        selected_by_prefix=state.selected_by_prefix,
        selected_count=len(state.selected),
        errors=state.errors,
    )


@router.get("/permissions", response_model=AvailablePermissionsResponse)
async def get_available_permissions(
    search: str = "",
    service: RoleEditorService = Depends(get_role_editor_service),
):
    """
    Get the permission catalog organized by group, filtered by an optional search term.
    """
    catalog: PermissionCatalog = await service.load_catalog()
    view = project(catalog, search)
    counts = catalog.counts_by_group()
    return AvailablePermissionsResponse(
        search=search,
        permissions=[_record(p) for perms in view.groups.values() for p in perms],
        groups={g: [_record(p) for p in perms] for g, perms in view.groups.items()},
        counts={g: counts[g] for g in view.group_names()},
    )


@router.post("/state", response_model=EditorStateResponse)
async def editor_state(
    body: EditorStateRequest,
    service: RoleEditorService = Depends(get_role_editor_service),
):
    """
    Replay the given actions on a draft and return what the form should display.
    """
    session = await _session_for(body, service)
    return _state_response(session)


@router.post("/validate", response_model=ValidateDraftResponse)
async def validate_draft(
    body: EditorStateRequest,
    service: RoleEditorService = Depends(get_role_editor_service),
):
    session = await _session_for(body, service)
    errors = session.validate()
    return ValidateDraftResponse(valid=not errors, errors=errors)


@router.post(
    "/submit",
    response_model=SubmitDraftResponse,
    status_code=201,
    responses={422: {"model": SubmitDraftResponse}},
)
async def submit_draft(
    body: EditorStateRequest,
    service: RoleEditorService = Depends(get_role_editor_service),
):
    """
    Validate the draft and create (no role_id) or update the role.
    """
    logger.info(
        "role_draft_submit_requested",
        extra={"role_id": body.role_id, "action_count": len(body.actions)},
    )
    session = await _session_for(body, service)
    result = await service.submit(session)
    if not result.success:
        payload = SubmitDraftResponse(success=False, role=None, errors=result.errors)
        return JSONResponse(status_code=422, content=payload.model_dump())
    return SubmitDraftResponse(success=True, role=result.role, errors={})
