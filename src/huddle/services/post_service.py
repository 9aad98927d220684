"""Service-level helpers for creating and deleting posts."""
from __future__ import annotations

import logging
from datetime import datetime

from huddle.core.errors import PostForbiddenError, PostNotFoundError, PostValidationError
from huddle.core.settings import settings
from huddle.db.time import as_utc, utcnow
from huddle.models.post import Post
from huddle.repositories.post_repo import PostRepository
from huddle.schemas.post import PlaceNames, PostCreate, PostResponse
from huddle.services.geo import validate_coordinates
from huddle.services.geocoding import GeocodingClient
from huddle.services.notifications import BroadcastJob

logger = logging.getLogger(__name__)

NEW_POST_TITLE = "New activity nearby"


def validate_post_input(payload: PostCreate) -> None:
    """Re-check the invariants the schema is expected to enforce.

    Raises:
        PostValidationError: With one message per offending field.
    """
    errors: dict[str, str] = {}
    for field in ("name", "activity", "location"):
        if not getattr(payload, field).strip():
            errors[field] = "This field is required"
    errors.update(validate_coordinates(payload.latitude, payload.longitude))
    if not settings.post_min_hours <= payload.hours <= settings.post_max_hours:
        errors["hours"] = (
            f"Hours must be between {settings.post_min_hours} and {settings.post_max_hours}"
        )
    if errors:
        raise PostValidationError(errors)


async def create_post(
    *,
    repo: PostRepository,
    payload: PostCreate,
    session_id: str,
    geocoder: GeocodingClient | None = None,
    now: datetime | None = None,
) -> Post:
    """Validate, enrich and persist a post owned by ``session_id``.

    Args:
        repo: Repository used to persist the post.
        payload: Validated request body.
        session_id: Anonymous session of the caller; becomes the owner.
        geocoder: Optional reverse geocoder; failures leave place names empty.
        now: Override for the creation instant (tests).

    Returns:
        The committed post. Creation and start timestamps are equal.

    Raises:
        PostValidationError: If the input violates a post invariant.
        StorageFailure: If the insert fails.
    """
    validate_post_input(payload)

    place: PlaceNames | None = None
    if geocoder is not None:
        place = await geocoder.reverse(payload.latitude, payload.longitude)

    created_at = as_utc(now) if now is not None else utcnow()
    post = repo.create(
        name=payload.name,
        activity=payload.activity,
        location=payload.location,
        latitude=payload.latitude,
        longitude=payload.longitude,
        hours=payload.hours,
        session_id=session_id,
        created_at=created_at,
        neighborhood=place.neighborhood if place else None,
        locality=place.locality if place else None,
        district=place.district if place else None,
    )
    logger.info("Created post %s (%d h)", post.id, post.hours)
    return post


def delete_post(*, repo: PostRepository, post_id: int, session_id: str) -> tuple[float, float]:
    """Delete a post on behalf of its owner.

    Returns:
        The deleted post's (latitude, longitude).

    Raises:
        PostNotFoundError: If no post has ``post_id``.
        PostForbiddenError: If ``session_id`` is not the post's owner.
    """
    post = repo.get_by_id(post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    if post.session_id != session_id:
        raise PostForbiddenError(post_id)
    coordinates = (post.latitude, post.longitude)
    repo.delete(post_id)
    logger.info("Deleted post %s", post_id)
    return coordinates


def place_names(post: Post) -> PlaceNames | None:
    """Return the post's place names, or None when enrichment is absent."""
    place = PlaceNames(
        neighborhood=post.neighborhood,
        locality=post.locality,
        district=post.district,
    )
    return None if place.is_empty else place


def to_post_response(post: Post, viewer_session_id: str | None) -> PostResponse:
    """Convert a Post ORM instance to an API schema for ``viewer_session_id``."""
    return PostResponse(
        id=post.id,
        name=post.name,
        activity=post.activity,
        location=post.location,
        latitude=post.latitude,
        longitude=post.longitude,
        hours=post.hours,
        place=place_names(post),
        created_at=as_utc(post.created_at),
        start_time=as_utc(post.start_time),
        ends_at=post.ends_at,
        owned=viewer_session_id is not None and post.session_id == viewer_session_id,
    )


def build_new_post_notification(post: Post) -> BroadcastJob:
    """Return the broadcast announcing ``post``."""
    return BroadcastJob(
        title=NEW_POST_TITLE,
        body=f"{post.name}: {post.activity} @ {post.location}",
        url="/",
    )
