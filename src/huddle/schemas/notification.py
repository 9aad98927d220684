"""Push subscription schemas."""
from __future__ import annotations

from pydantic import BaseModel, Field


class SubscriptionKeys(BaseModel):
    """Client keys from ``PushSubscription.toJSON()``."""

    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class SubscriptionCreate(BaseModel):
    """Body of a subscribe request."""

    endpoint: str = Field(..., min_length=1, description="Push service endpoint URL")
    keys: SubscriptionKeys


class UnsubscribeRequest(BaseModel):
    """Body of an unsubscribe request."""

    endpoint: str = Field(..., min_length=1)


class SuccessResponse(BaseModel):
    success: bool = True


class PublicKeyResponse(BaseModel):
    publicKey: str
