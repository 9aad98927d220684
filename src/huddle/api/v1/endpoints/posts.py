# src/huddle/api/v1/endpoints/posts.py
"""Post-related endpoints for the Huddle API."""

from fastapi import APIRouter, Query, status

from huddle.api.v1.dependencies import (
    DispatcherDep,
    GeocoderDep,
    PostRepoDep,
    SessionIdDep,
)
from huddle.core.errors import PostValidationError
from huddle.repositories.post_repo import PostRepository
from huddle.schemas.post import PostCreate, PostResponse
from huddle.services.post_service import (
    build_new_post_notification,
    create_post,
    delete_post,
    to_post_response,
)
from huddle.services.visibility import active_posts_near

router = APIRouter(prefix="/posts", tags=["posts"])


def _visible(
    repo: PostRepository, latitude: float, longitude: float, session_id: str
) -> list[PostResponse]:
    posts = active_posts_near(repo, latitude, longitude)
    return [to_post_response(post, session_id) for post in posts]


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    repo: PostRepoDep,
    session_id: SessionIdDep,
    latitude: float = Query(..., ge=-90, le=90, description="Observer latitude"),
    longitude: float = Query(..., ge=-180, le=180, description="Observer longitude"),
) -> list[PostResponse]:
    """List active posts near the observer, newest first.

    Args:
        repo: Post repository
        session_id: Caller's anonymous session
        latitude: Observer latitude
        longitude: Observer longitude

    Returns:
        Posts whose window is still open and that lie within the visibility radius
    """
    return _visible(repo, latitude, longitude, session_id)


@router.post("/", response_model=list[PostResponse], status_code=status.HTTP_201_CREATED)
async def create_new_post(
    payload: PostCreate,
    repo: PostRepoDep,
    session_id: SessionIdDep,
    geocoder: GeocoderDep,
    dispatcher: DispatcherDep,
) -> list[PostResponse]:
    """Create a post owned by the caller's session.

    The new-post notification is queued and sent in the background; its
    outcome never affects this response.

    Returns:
        The visible posts around the new post's coordinates
    """
    post = await create_post(
        repo=repo,
        payload=payload,
        session_id=session_id,
        geocoder=geocoder,
    )
    dispatcher.enqueue(build_new_post_notification(post))
    return _visible(repo, post.latitude, post.longitude, session_id)


@router.delete("/{post_id}", response_model=list[PostResponse])
async def remove_post(
    post_id: int,
    repo: PostRepoDep,
    session_id: SessionIdDep,
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
) -> list[PostResponse]:
    """Delete one of the caller's posts.

    Args:
        post_id: ID of the post to delete
        repo: Post repository
        session_id: Caller's anonymous session (must own the post)
        latitude: Observer latitude for the refreshed list; defaults to the post's
        longitude: Observer longitude for the refreshed list; defaults to the post's

    Returns:
        The refreshed list of visible posts

    Raises:
        PostValidationError: If only one of latitude/longitude is given (400)
        PostNotFoundError: If the post does not exist (404)
        PostForbiddenError: If the caller does not own the post (403)
    """
    if (latitude is None) != (longitude is None):
        missing = "longitude" if longitude is None else "latitude"
        raise PostValidationError(
            {missing: "latitude and longitude must be given together"}
        )
    post_latitude, post_longitude = delete_post(
        repo=repo, post_id=post_id, session_id=session_id
    )
    if latitude is None:
        latitude, longitude = post_latitude, post_longitude
    return _visible(repo, latitude, longitude, session_id)
