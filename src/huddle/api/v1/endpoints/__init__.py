# src/huddle/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .location import router as location_router
from .notifications import router as notifications_router
from .posts import router as posts_router

__all__ = [
    "location_router",
    "notifications_router",
    "posts_router",
]
