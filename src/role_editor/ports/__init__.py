"""Ports package - defines interfaces for external dependencies.

The role editor talks to exactly two collaborators: whatever supplies the
permission catalog (and the role being edited) and whatever persists the
finished role.
"""

from .roles import PermissionCatalogPort, RoleSubmissionPort

__all__ = [
    "PermissionCatalogPort",
    "RoleSubmissionPort",
]
