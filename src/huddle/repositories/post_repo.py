"""Data access helpers for working with posts."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.core.errors import StorageFailure
from huddle.models.post import Post

__all__ = ["PostRepository"]

logger = logging.getLogger(__name__)


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def list_candidates(
        self,
        *,
        started_after: datetime,
        min_latitude: float,
        max_latitude: float,
    ) -> list[Post]:
        """Return posts that may be visible, newest first.

        This is a coarse index-friendly prefilter: posts that started before
        ``started_after`` cannot still be active, and posts outside the latitude
        band cannot be within the radius. Exact filtering happens in
        ``huddle.services.visibility``.
        """
        stmt = (
            select(Post)
            .where(
                Post.start_time > started_after,
                Post.latitude >= min_latitude,
                Post.latitude <= max_latitude,
            )
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def create(
        self,
        *,
        name: str,
        activity: str,
        location: str,
        latitude: float,
        longitude: float,
        hours: int,
        session_id: str,
        created_at: datetime,
        neighborhood: str | None = None,
        locality: str | None = None,
        district: str | None = None,
    ) -> Post:
        """Insert and commit a new post, returning the persisted instance.

        ``created_at`` is also used as the start of the active window.

        Raises:
            StorageFailure: If the insert or commit fails; nothing is persisted.
        """
        post = Post(
            name=name,
            activity=activity,
            location=location,
            latitude=latitude,
            longitude=longitude,
            hours=hours,
            neighborhood=neighborhood,
            locality=locality,
            district=district,
            created_at=created_at,
            start_time=created_at,
            session_id=session_id,
        )
        try:
            self.session.add(post)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to insert post")
            raise StorageFailure("Could not save post") from exc
        self.session.refresh(post)
        return post

    def delete(self, post_id: int) -> None:
        """Delete a post by id and commit.

        Raises:
            StorageFailure: If the delete or commit fails.
        """
        try:
            self.session.execute(delete(Post).where(Post.id == post_id))
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to delete post %s", post_id)
            raise StorageFailure("Could not delete post") from exc

    @staticmethod
    def window_start_cutoff(now: datetime, max_hours: int) -> datetime:
        """Earliest start time a still-active post can have."""
        return now - timedelta(hours=max_hours)
