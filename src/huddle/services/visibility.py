"""Active-post visibility query.

A post is visible to an observer when both hold:

1. its active window has not elapsed: ``now < start_time + hours``;
2. it lies within the visibility radius of the observer.

Expiry is lazy. Expired rows stay in storage and are only filtered out here.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from huddle.core.errors import PostValidationError
from huddle.core.settings import settings
from huddle.db.time import as_utc, utcnow
from huddle.models.post import Post
from huddle.repositories.post_repo import PostRepository
from huddle.services.geo import great_circle_distance, latitude_band, validate_coordinates


def is_active(post: Post, now: datetime) -> bool:
    """Return True while ``now`` is inside the post's active window."""
    return as_utc(now) < post.ends_at


def is_within_radius(
    post: Post,
    latitude: float,
    longitude: float,
    radius: float | None = None,
) -> bool:
    """Return True when the post is no farther than ``radius`` from the observer."""
    limit = settings.visibility_radius_miles if radius is None else radius
    distance = great_circle_distance(latitude, longitude, post.latitude, post.longitude)
    return distance <= limit


def _newest_first(posts: Iterable[Post]) -> list[Post]:
    # id breaks ties between posts created in the same instant.
    return sorted(posts, key=lambda p: (as_utc(p.created_at), p.id), reverse=True)


def filter_visible(
    posts: Iterable[Post],
    latitude: float,
    longitude: float,
    *,
    now: datetime,
    radius: float | None = None,
) -> list[Post]:
    """Apply the exact visibility predicate to ``posts`` and order newest first."""
    return _newest_first(
        post
        for post in posts
        if is_active(post, now) and is_within_radius(post, latitude, longitude, radius)
    )


def active_posts_near(
    repo: PostRepository,
    latitude: float,
    longitude: float,
    *,
    now: datetime | None = None,
    radius: float | None = None,
) -> list[Post]:
    """Return every currently active post within the radius of the observer.

    Args:
        repo: Post repository bound to the request's session.
        latitude: Observer latitude in degrees.
        longitude: Observer longitude in degrees.
        now: Override for the server clock (tests); read fresh on every call otherwise.
        radius: Override for the visibility radius in miles.

    Returns:
        Matching posts, most recently created first. No limit is applied.

    Raises:
        PostValidationError: If the observer coordinates are out of range.
    """
    errors = validate_coordinates(latitude, longitude)
    if errors:
        raise PostValidationError(errors)

    current = as_utc(now) if now is not None else utcnow()
    limit = settings.visibility_radius_miles if radius is None else radius
    min_lat, max_lat = latitude_band(latitude, limit)
    candidates = repo.list_candidates(
        started_after=PostRepository.window_start_cutoff(current, settings.post_max_hours),
        min_latitude=min_lat,
        max_latitude=max_lat,
    )
    return filter_visible(candidates, latitude, longitude, now=current, radius=limit)
