from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_GROUP = "other"


@dataclass(frozen=True)
class Permission:
    id: Any
    name: str
    group_name: str = DEFAULT_GROUP


def _field(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


class PermissionCatalog:
    """Immutable catalog of grantable permissions, indexed by group.

    The group index is built once here; callers never re-derive it. Group
    order follows the first appearance of each group in the source records,
    and permissions keep their source order inside a group.
    """

    def __init__(self, permissions: Iterable[Permission]):
        self._permissions: Tuple[Permission, ...] = tuple(permissions)
        groups: Dict[str, List[Permission]] = {}
        group_of: Dict[str, List[str]] = {}
        for perm in self._permissions:
            groups.setdefault(perm.group_name, []).append(perm)
            owners = group_of.setdefault(perm.name, [])
            if perm.group_name in owners:
                continue
            if owners:
                logger.warning(
                    "duplicate_permission_name",
                    extra={"permission": perm.name, "groups": owners + [perm.group_name]},
                )
            owners.append(perm.group_name)
        self._groups: Mapping[str, Tuple[Permission, ...]] = MappingProxyType(
            {g: tuple(perms) for g, perms in groups.items()}
        )
        self._names_by_group: Dict[str, Tuple[str, ...]] = {
            g: tuple(dict.fromkeys(p.name for p in perms)) for g, perms in self._groups.items()
        }
        self._groups_of: Dict[str, Tuple[str, ...]] = {n: tuple(g) for n, g in group_of.items()}

    @classmethod
    def from_records(
        cls, records: Iterable[Any], fallback_group: str = DEFAULT_GROUP
    ) -> "PermissionCatalog":
        """Normalize raw ``{id, name, group_name}`` records into a catalog.

        Records may be mappings or objects exposing the same attributes. A
        missing or blank ``group_name`` lands in ``fallback_group``; records
        without a name cannot be selected and are dropped.
        """
        perms: List[Permission] = []
        for record in records:
            name = _field(record, "name")
            if not name:
                logger.warning("permission_record_without_name", extra={"record": repr(record)})
                continue
            group = _field(record, "group_name")
            if not isinstance(group, str) or not group.strip():
                group = fallback_group
            perms.append(Permission(id=_field(record, "id"), name=str(name), group_name=group))
        return cls(perms)

    @property
    def permissions(self) -> Tuple[Permission, ...]:
        return self._permissions

    @property
    def groups(self) -> Mapping[str, Tuple[Permission, ...]]:
        return self._groups

    def group_names(self) -> List[str]:
        return list(self._groups)

    def has_group(self, group_name: str) -> bool:
        return group_name in self._groups

    def names_in_group(self, group_name: str) -> Tuple[str, ...]:
        return self._names_by_group.get(group_name, ())

    def group_of(self, name: str) -> Optional[str]:
        owners = self._groups_of.get(name)
        return owners[0] if owners else None

    def groups_of(self, name: str) -> Tuple[str, ...]:
        # more than one entry only when a name is declared in several groups
        return self._groups_of.get(name, ())

    def counts_by_group(self) -> Dict[str, int]:
        return {g: len(names) for g, names in self._names_by_group.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._groups_of

    def __iter__(self) -> Iterator[Permission]:
        return iter(self._permissions)

    def __len__(self) -> int:
        return len(self._permissions)
