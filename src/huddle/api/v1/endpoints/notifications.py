"""Push notification subscription endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from huddle.api.v1.dependencies import SessionIdDep, SubscriptionRepoDep
from huddle.core.settings import settings
from huddle.schemas.notification import (
    PublicKeyResponse,
    SubscriptionCreate,
    SuccessResponse,
    UnsubscribeRequest,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.post("/subscribe", response_model=SuccessResponse)
async def subscribe(
    payload: SubscriptionCreate,
    repo: SubscriptionRepoDep,
    session_id: SessionIdDep,
) -> SuccessResponse:
    """Register a browser push endpoint.

    Idempotent: subscribing an endpoint again replaces its keys.
    """
    repo.upsert(
        endpoint=payload.endpoint,
        p256dh=payload.keys.p256dh,
        auth=payload.keys.auth,
        session_id=session_id,
    )
    logger.info("Registered push subscription")
    return SuccessResponse()


@router.post("/unsubscribe", response_model=SuccessResponse)
async def unsubscribe(
    payload: UnsubscribeRequest,
    repo: SubscriptionRepoDep,
) -> SuccessResponse:
    """Remove a push endpoint; unknown endpoints still succeed."""
    repo.delete_by_endpoint(payload.endpoint)
    return SuccessResponse()


@router.get("/vapid-public-key", response_model=PublicKeyResponse)
async def vapid_public_key() -> PublicKeyResponse:
    """Return the VAPID application server key for ``pushManager.subscribe``."""
    if not settings.vapid_public_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="VAPID public key not configured",
        )
    return PublicKeyResponse(publicKey=settings.vapid_public_key)
