# src/huddle/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PlaceNames(BaseModel):
    """Human-readable place names derived from a post's coordinates."""

    neighborhood: str | None = None
    locality: str | None = None
    district: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.neighborhood or self.locality or self.district)


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    activity: str = Field(..., min_length=1, max_length=500, description="What you are doing")
    location: str = Field(..., min_length=1, max_length=200, description="Where, in words")
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    hours: int = Field(..., ge=1, le=24, description="How long the post stays active")


class PostResponse(BaseModel):
    """Schema for post information returned by the API.

    The owning session id is never exposed; ``owned`` tells the caller whether
    they may delete the post.
    """

    id: int
    name: str
    activity: str
    location: str
    latitude: float
    longitude: float
    hours: int
    place: PlaceNames | None
    created_at: datetime
    start_time: datetime
    ends_at: datetime
    owned: bool
