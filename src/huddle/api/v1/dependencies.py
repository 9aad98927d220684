"""Shared API dependencies for identity, storage and services."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from huddle.db.session import get_db
from huddle.repositories import PostRepository, SubscriptionRepository
from huddle.services.geocoding import GeocodingClient, get_geocoding_client
from huddle.services.identity import resolve_session
from huddle.services.ip_location import IpLocator, get_ip_locator
from huddle.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_id(request: Request) -> str:
    """Return the caller's anonymous session id.

    ``AnonymousSessionMiddleware`` normally resolves it; when the middleware is
    not installed the cookie is resolved here (without writing one back).
    """
    session_id = getattr(request.state, "anonymous_session_id", None)
    if session_id:
        return session_id
    return resolve_session(dict(request.cookies)).session_id


def get_post_repository(db: SessionDep) -> PostRepository:
    """Return a post repository bound to the request session."""
    return PostRepository(db)


def get_subscription_repository(db: SessionDep) -> SubscriptionRepository:
    """Return a subscription repository bound to the request session."""
    return SubscriptionRepository(db)


def get_geocoder() -> GeocodingClient:
    """Return the shared reverse geocoder."""
    return get_geocoding_client()


def get_locator() -> IpLocator:
    """Return an IP locator."""
    return get_ip_locator()


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    """Return the dispatcher started with the application."""
    dispatcher: NotificationDispatcher | None = getattr(
        request.app.state, "notification_dispatcher", None
    )
    if dispatcher is None:
        logger.error(
            "Notification dispatcher was not started with the application; "
            "new-post notifications will be dropped"
        )
        dispatcher = NotificationDispatcher()
        request.app.state.notification_dispatcher = dispatcher
    return dispatcher


SessionIdDep = Annotated[str, Depends(get_session_id)]
PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]
SubscriptionRepoDep = Annotated[SubscriptionRepository, Depends(get_subscription_repository)]
GeocoderDep = Annotated[GeocodingClient, Depends(get_geocoder)]
LocatorDep = Annotated[IpLocator, Depends(get_locator)]
DispatcherDep = Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)]
