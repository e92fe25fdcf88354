from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set

from ..logging_config import get_logger
from .permission import DEFAULT_GROUP, PermissionCatalog

logger = get_logger(__name__)


class SelectionSet:
    """Permission names assigned to the role draft.

    This is the only source of truth for "is this permission selected".
    Every mutator is idempotent and returns whether the set changed.
    Insertion order is kept so payloads are stable, but callers must not
    rely on it.
    """

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names: Dict[str, None] = dict.fromkeys(names or ())

    def contains(self, name: str) -> bool:
        return name in self._names

    def add(self, name: str) -> bool:
        if name in self._names:
            return False
        self._names[name] = None
        return True

    def remove(self, name: str) -> bool:
        if name not in self._names:
            return False
        del self._names[name]
        return True

    def add_all(self, names: Iterable[str]) -> bool:
        changed = False
        for name in names:
            changed = self.add(name) or changed
        return changed

    def remove_all(self, names: Iterable[str]) -> bool:
        changed = False
        for name in names:
            changed = self.remove(name) or changed
        return changed

    def clear(self) -> bool:
        changed = bool(self._names)
        self._names.clear()
        return changed

    def to_list(self) -> List[str]:
        return list(self._names)

    def copy(self) -> "SelectionSet":
        return SelectionSet(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SelectionSet):
            return self._names.keys() == other._names.keys()
        if isinstance(other, AbstractSet):
            return self._names.keys() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"SelectionSet({self.to_list()!r})"


@dataclass(frozen=True)
class GroupSelectionSummary:
    group: str
    total: int
    selected: int

    @property
    def is_full(self) -> bool:
        return self.total > 0 and self.selected == self.total

    @property
    def is_partial(self) -> bool:
        return 0 < self.selected < self.total

    def to_dict(self) -> dict:
        return {
            "group": self.group,
            "total": self.total,
            "selected": self.selected,
            "is_full": self.is_full,
            "is_partial": self.is_partial,
        }


def summarize_group(
    catalog: PermissionCatalog, selection: SelectionSet, group_name: str
) -> GroupSelectionSummary:
    names = catalog.names_in_group(group_name)
    selected = sum(1 for n in names if n in selection)
    return GroupSelectionSummary(group=group_name, total=len(names), selected=selected)


def summarize(
    catalog: PermissionCatalog, selection: SelectionSet
) -> Dict[str, GroupSelectionSummary]:
    """Per-group selection counts over the whole (unfiltered) catalog."""
    return {g: summarize_group(catalog, selection, g) for g in catalog.group_names()}


def quick_select_chips(catalog: PermissionCatalog, selection: SelectionSet) -> FrozenSet[str]:
    return frozenset(g for g, s in summarize(catalog, selection).items() if s.is_full)


def permission_label(name: str) -> str:
    """Short label for a namespaced permission: ``orders.create`` -> ``create``."""
    _, sep, rest = name.partition(".")
    return rest if sep else name


def group_selected_by_prefix(names: Iterable[str]) -> Dict[str, List[str]]:
    """Bucket selected names by their first dot segment.

    Unlike the catalog index this only looks at the names themselves, so a
    selection seeded from a role can be shown before the catalog is known.
    """
    buckets: Dict[str, List[str]] = {}
    for name in names:
        prefix = name.split(".", 1)[0] or DEFAULT_GROUP
        buckets.setdefault(prefix, []).append(name)
    return buckets


class GroupToggleEngine:
    """Item- and group-level selection operations over one SelectionSet.

    The quick-select chip set is cached and refreshed only for the groups a
    mutation touches; ``quick_select_chips`` recomputes the same value from
    scratch. Names or groups unknown to the catalog are ignored.
    """

    def __init__(self, catalog: PermissionCatalog, selection: Optional[SelectionSet] = None):
        self.catalog = catalog
        self.selection = selection if selection is not None else SelectionSet()
        self._chips: Set[str] = set(quick_select_chips(catalog, self.selection))

    @property
    def chips(self) -> FrozenSet[str]:
        return frozenset(self._chips)

    def summary(self, group_name: str) -> GroupSelectionSummary:
        return summarize_group(self.catalog, self.selection, group_name)

    def summaries(self) -> Dict[str, GroupSelectionSummary]:
        return summarize(self.catalog, self.selection)

    def is_full(self, group_name: str) -> bool:
        return self.summary(group_name).is_full

    def is_partial(self, group_name: str) -> bool:
        return self.summary(group_name).is_partial

    def _refresh(self, groups: Iterable[str]) -> None:
        for g in groups:
            if self.summary(g).is_full:
                self._chips.add(g)
            else:
                self._chips.discard(g)

    def toggle_permission(self, name: str, checked: bool) -> bool:
        groups = self.catalog.groups_of(name)
        if not groups:
            logger.debug("toggle_unknown_permission", extra={"permission": name})
            return False
        if checked:
            changed = self.selection.add(name)
        else:
            changed = self.selection.remove(name)
        if changed:
            self._refresh(groups)
        return changed

    def remove_permission(self, name: str) -> bool:
        return self.toggle_permission(name, False)

    def select_group(self, group_name: str) -> bool:
        if not self.catalog.has_group(group_name):
            logger.debug("select_unknown_group", extra={"group": group_name})
            return False
        names = self.catalog.names_in_group(group_name)
        changed = self.selection.add_all(names)
        if changed:
            self._refresh(self._groups_touched(names))
        return changed

    def deselect_group(self, group_name: str) -> bool:
        if not self.catalog.has_group(group_name):
            logger.debug("deselect_unknown_group", extra={"group": group_name})
            return False
        names = self.catalog.names_in_group(group_name)
        changed = self.selection.remove_all(names)
        if changed:
            self._refresh(self._groups_touched(names))
        return changed

    def toggle_group(self, group_name: str) -> bool:
        """Quick-select chip click: clear a fully selected group, fill any other."""
        if group_name in self._chips:
            return self.deselect_group(group_name)
        return self.select_group(group_name)

    def clear(self) -> bool:
        changed = self.selection.clear()
        self._chips.clear()
        return changed

    def _groups_touched(self, names: Iterable[str]) -> Set[str]:
        touched: Set[str] = set()
        for n in names:
            touched.update(self.catalog.groups_of(n))
        return touched
