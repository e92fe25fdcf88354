"""Top-level application package public surface."""

__all__ = [
    "domain",
    "infrastructure",
    "middleware",
    "ports",
    "routers",
    "schemas",
    "services",
]
