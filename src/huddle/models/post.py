# src/huddle/models/post.py
"""SQLAlchemy model for activity posts."""

from datetime import datetime, timedelta

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from huddle.db.session import Base
from huddle.db.time import as_utc, utcnow


class Post(Base):
    """A time-bounded invitation to join an activity at a place.

    Posts are never edited. They stop being visible once ``start_time + hours``
    has passed, but the row stays in storage until its owner deletes it.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("hours >= 1 AND hours <= 24", name="ck_post_hours_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    activity: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)

    # Reverse-geocoded place names; all null when enrichment was unavailable.
    neighborhood: Mapped[str | None] = mapped_column(Text, nullable=True)
    locality: Mapped[str | None] = mapped_column(Text, nullable=True)
    district: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    # Anonymous session that created the post; the only credential for deletion.
    session_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    @property
    def ends_at(self) -> datetime:
        """End of the active window (exclusive), in UTC."""
        return as_utc(self.start_time) + timedelta(hours=self.hours)
