# src/huddle/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    location_router,
    notifications_router,
    posts_router,
)

__all__ = [
    "location_router",
    "notifications_router",
    "posts_router",
]
