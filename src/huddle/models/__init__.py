# src/huddle/models/__init__.py
"""SQLAlchemy models for the Huddle application."""

from .notification_subscription import NotificationSubscription
from .post import Post

__all__ = [
    "NotificationSubscription",
    "Post",
]
