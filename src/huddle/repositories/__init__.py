"""Data access layer."""

from .post_repo import PostRepository
from .subscription_repo import SubscriptionRepository

__all__ = ["PostRepository", "SubscriptionRepository"]
