"""Exceptions raised at the role editor's port boundary.

The selection engine itself never raises for stale names or groups; these
types only describe failures reported by the collaborators that load the
catalog and persist finished roles.
"""

from typing import Any, Dict, List, Union

ErrorValue = Union[str, List[str]]


class RoleEditorError(Exception):
    """Base class for role editor errors."""


class RemoteValidationError(RoleEditorError):
    """Field-keyed validation failure returned by the role backend."""

    def __init__(self, errors: Dict[str, ErrorValue]):
        self.errors = dict(errors)
        super().__init__(f"remote validation failed: {sorted(self.errors)}")


class RoleNotFoundError(RoleEditorError):
    def __init__(self, role_id: Any):
        self.role_id = role_id
        super().__init__(f"role {role_id!r} not found")
