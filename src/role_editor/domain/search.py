from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .permission import Permission, PermissionCatalog


@dataclass(frozen=True)
class FilteredView:
    """Groups and permissions left visible by a search query.

    Display only: selection counts for these groups always come from the
    unfiltered catalog.
    """

    query: str
    groups: Dict[str, Tuple[Permission, ...]] = field(default_factory=dict)

    def group_names(self) -> List[str]:
        return list(self.groups)

    def permission_count(self) -> int:
        return sum(len(perms) for perms in self.groups.values())

    def is_empty(self) -> bool:
        return not self.groups

    def __contains__(self, group_name: object) -> bool:
        return group_name in self.groups


def project(catalog: PermissionCatalog, query: str) -> FilteredView:
    """Case-insensitive substring filter on permission name or group name."""
    if not query:
        return FilteredView(query="", groups=dict(catalog.groups))
    needle = query.lower()
    groups: Dict[str, Tuple[Permission, ...]] = {}
    for group_name, perms in catalog.groups.items():
        if needle in group_name.lower():
            groups[group_name] = perms
            continue
        matched = tuple(p for p in perms if needle in p.name.lower())
        if matched:
            groups[group_name] = matched
    return FilteredView(query=query, groups=groups)
