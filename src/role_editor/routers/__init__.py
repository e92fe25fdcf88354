"""Routers package public exports."""

__all__ = [
    "health",
    "role_editor",
]
