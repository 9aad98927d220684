"""Observer location schema."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ObserverLocation(BaseModel):
    """Approximate location used as the default observer position."""

    latitude: float
    longitude: float
    city: str | None = None
    country: str | None = None
    source: Literal["ip", "default", "fallback"] = "ip"
