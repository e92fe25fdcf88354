from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from ..config import Settings
from ..domain.permission import Permission, PermissionCatalog
from ..domain.role_draft import GuardName, RoleDraft, merge_errors, validate_draft
from ..domain.search import FilteredView, project
from ..domain.selection import (
    GroupSelectionSummary,
    GroupToggleEngine,
    SelectionSet,
    group_selected_by_prefix,
)
from ..exceptions import RemoteValidationError, RoleNotFoundError
from ..logging_config import get_logger
from ..ports.roles import PermissionCatalogPort, RoleSubmissionPort

logger = get_logger(__name__)

ALL_TAB = "all"


def _record_change(operation: str) -> None:
    try:
        from ..metrics import SELECTION_CHANGES

        if SELECTION_CHANGES is not None:
            SELECTION_CHANGES.labels(operation=operation).inc()
    except Exception as e:
        logger.debug("selection_metric_failed", extra={"operation": operation, "error": str(e)})


@dataclass(frozen=True)
class EditorDisplayState:
    """Everything a renderer needs for one frame of the role form."""

    draft: Dict[str, Any]
    search: str
    active_tab: str
    groups: Dict[str, Tuple[Permission, ...]]
    selected: FrozenSet[str]
    summaries: Dict[str, GroupSelectionSummary]
    quick_select: FrozenSet[str]
    selected_by_prefix: Dict[str, List[str]]
    errors: Dict[str, str]


class RoleEditorSession:
    """One open role form: the draft, its selection engine and view state.

    Selection changes go through the engine so the quick-select chips stay in
    step with the selected permissions; search and tab changes never touch
    the selection.
    """

    def __init__(
        self,
        catalog: PermissionCatalog,
        draft: Optional[RoleDraft] = None,
        default_guard: str = GuardName.WEB.value,
    ):
        self.catalog = catalog
        self.default_guard = default_guard
        self.draft = draft if draft is not None else RoleDraft(guard_name=default_guard)
        self.engine = GroupToggleEngine(catalog, self.draft.permissions)
        self.search = ""
        self.active_tab = ALL_TAB
        self.errors: Dict[str, str] = {}

    @classmethod
    def new(cls, catalog: PermissionCatalog, guard_name: str = GuardName.WEB.value):
        return cls(catalog, RoleDraft(guard_name=guard_name), default_guard=guard_name)

    @classmethod
    def for_role(cls, catalog: PermissionCatalog, role: Mapping[str, Any]):
        return cls(catalog, RoleDraft.from_role(role))

    @property
    def selection(self) -> SelectionSet:
        return self.draft.permissions

    @property
    def role_id(self) -> Optional[Any]:
        return self.draft.role_id

    # selection -----------------------------------------------------------

    def _apply(self, operation: str, changed: bool) -> bool:
        if changed:
            _record_change(operation)
        return changed

    def toggle_permission(self, name: str, checked: bool) -> bool:
        return self._apply("toggle_permission", self.engine.toggle_permission(name, checked))

    def remove_permission(self, name: str) -> bool:
        return self._apply("remove_permission", self.engine.remove_permission(name))

    def select_group(self, group_name: str) -> bool:
        return self._apply("select_group", self.engine.select_group(group_name))

    def deselect_group(self, group_name: str) -> bool:
        return self._apply("deselect_group", self.engine.deselect_group(group_name))

    def toggle_group(self, group_name: str) -> bool:
        return self._apply("toggle_group", self.engine.toggle_group(group_name))

    # details, search and tabs --------------------------------------------

    def update_details(
        self,
        name: Optional[str] = None,
        guard_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        if name is not None:
            self.draft.name = name
        if guard_name is not None:
            self.draft.guard_name = guard_name
        if description is not None:
            self.draft.description = description

    def set_search(self, query: str) -> None:
        self.search = query or ""

    def clear_search(self) -> None:
        self.search = ""

    def set_active_tab(self, tab: str) -> bool:
        if tab != ALL_TAB and not self.catalog.has_group(tab):
            return False
        self.active_tab = tab
        return True

    # projections -----------------------------------------------------------

    def filtered_view(self) -> FilteredView:
        return project(self.catalog, self.search)

    def visible_groups(self) -> Dict[str, Tuple[Permission, ...]]:
        view = self.filtered_view()
        if self.active_tab == ALL_TAB:
            return dict(view.groups)
        if self.active_tab in view:
            return {self.active_tab: view.groups[self.active_tab]}
        return {}

    def summaries(self) -> Dict[str, GroupSelectionSummary]:
        return self.engine.summaries()

    def quick_select(self) -> FrozenSet[str]:
        return self.engine.chips

    def selected_by_prefix(self) -> Dict[str, List[str]]:
        return group_selected_by_prefix(self.selection)

    def selected_count(self) -> int:
        return len(self.selection)

    def display_state(self) -> EditorDisplayState:
        return EditorDisplayState(
            draft=self.payload(),
            search=self.search,
            active_tab=self.active_tab,
            groups=self.visible_groups(),
            selected=frozenset(self.selection),
            summaries=self.summaries(),
            quick_select=self.quick_select(),
            selected_by_prefix=self.selected_by_prefix(),
            errors=dict(self.errors),
        )

    # validation and submission --------------------------------------------

    def validate(self) -> Dict[str, str]:
        self.errors = validate_draft(self.draft)
        try:
            from ..metrics import DRAFT_VALIDATIONS

            if DRAFT_VALIDATIONS is not None:
                DRAFT_VALIDATIONS.labels(result="invalid" if self.errors else "valid").inc()
        except Exception as e:
            logger.debug("validation_metric_failed", extra={"error": str(e)})
        return dict(self.errors)

    def apply_remote_errors(self, remote: Mapping[str, Any]) -> Dict[str, str]:
        self.errors = merge_errors(self.errors, remote)
        return dict(self.errors)

    def payload(self) -> Dict[str, Any]:
        return self.draft.to_payload()

    def reset(self) -> None:
        self.draft.name = ""
        self.draft.description = ""
        self.draft.guard_name = self.default_guard
        self.engine.clear()
        self.search = ""
        self.active_tab = ALL_TAB
        self.errors = {}


@dataclass
class SubmissionResult:
    success: bool
    role: Optional[Dict[str, Any]] = None
    errors: Dict[str, str] = field(default_factory=dict)


class RoleEditorService:
    def __init__(
        self,
        catalog_port: PermissionCatalogPort,
        submission_port: RoleSubmissionPort,
        settings: Optional[Settings] = None,
    ):
        self.catalog_port = catalog_port
        self.submission_port = submission_port
        self.settings = settings or Settings()

    async def load_catalog(self) -> PermissionCatalog:
        records = await self.catalog_port.list_permissions()
        return PermissionCatalog.from_records(
            records, fallback_group=self.settings.fallback_group_name
        )

    async def open_session(self, role_id: Optional[Any] = None) -> RoleEditorSession:
        catalog = await self.load_catalog()
        if role_id is None:
            return RoleEditorSession.new(catalog, guard_name=self.settings.default_guard_name)
        role = await self.catalog_port.get_role(role_id)
        if not role:
            logger.warning("role_not_found_for_edit", extra={"role_id": role_id})
            raise RoleNotFoundError(role_id)
        session = RoleEditorSession.for_role(catalog, role)
        session.default_guard = self.settings.default_guard_name
        return session

    async def open_draft(
        self, draft: Mapping[str, Any], role_id: Optional[Any] = None
    ) -> RoleEditorSession:
        """Resume a draft whose fields and selection the caller kept itself."""
        catalog = await self.load_catalog()
        seeded = RoleDraft(
            name=draft.get("name") or "",
            guard_name=draft.get("guard_name") or self.settings.default_guard_name,
            description=draft.get("description") or "",
            permissions=SelectionSet(draft.get("permissions") or ()),
            role_id=role_id,
        )
        return RoleEditorSession(catalog, seeded, default_guard=self.settings.default_guard_name)

    async def submit(self, session: RoleEditorSession) -> SubmissionResult:
        """Validate the draft and hand it to the submission port once.

        Local errors stop before the port is called; backend field errors are
        merged into the session's error mapping. A successful create clears
        the form for the next role.
        """
        mode = "update" if session.draft.is_edit else "create"
        errors = session.validate()
        if errors:
            _record_submission(mode, "invalid")
            return SubmissionResult(success=False, errors=errors)

        payload = session.payload()
        logger.info(
            "submitting_role_draft",
            extra={
                "mode": mode,
                "role_id": session.role_id,
                "permission_count": len(payload["permissions"]),
            },
        )
        try:
            if mode == "update":
                role = await self.submission_port.update_role(session.role_id, payload)
            else:
                role = await self.submission_port.create_role(payload)
        except RemoteValidationError as e:
            logger.info("role_draft_rejected", extra={"mode": mode, "fields": sorted(e.errors)})
            _record_submission(mode, "rejected")
            return SubmissionResult(success=False, errors=session.apply_remote_errors(e.errors))

        _record_submission(mode, "success")
        logger.info("role_draft_submitted", extra={"mode": mode, "role_id": role.get("id")})
        if mode == "create":
            session.reset()
        else:
            session.errors = {}
        return SubmissionResult(success=True, role=role)


def _record_submission(mode: str, result: str) -> None:
    try:
        from ..metrics import ROLE_SUBMISSIONS

        if ROLE_SUBMISSIONS is not None:
            ROLE_SUBMISSIONS.labels(mode=mode, result=result).inc()
    except Exception as e:
        logger.debug("submission_metric_failed", extra={"mode": mode, "error": str(e)})
