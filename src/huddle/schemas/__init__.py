# src/huddle/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .location import ObserverLocation
from .notification import (
    PublicKeyResponse,
    SubscriptionCreate,
    SubscriptionKeys,
    SuccessResponse,
    UnsubscribeRequest,
)
from .post import PlaceNames, PostCreate, PostResponse

__all__ = [
    "ObserverLocation",
    "PublicKeyResponse", "SubscriptionCreate", "SubscriptionKeys",
    "SuccessResponse", "UnsubscribeRequest",
    "PlaceNames", "PostCreate", "PostResponse",
]
