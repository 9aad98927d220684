"""Great-circle distance helpers."""

from __future__ import annotations

import math

from huddle.core.settings import settings

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


def great_circle_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    *,
    radius: float | None = None,
) -> float:
    """Return the distance between two points using the spherical law of cosines.

    ``d = R * acos(sin(phi1)sin(phi2) + cos(phi1)cos(phi2)cos(dlambda))``. The
    result is in the unit of ``radius`` (miles by default).
    """
    planet_radius = settings.earth_radius_miles if radius is None else radius
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)
    cosine = math.sin(phi1) * math.sin(phi2) + math.cos(phi1) * math.cos(phi2) * math.cos(
        delta_lambda
    )
    # Rounding can push identical points slightly past 1.0.
    cosine = max(-1.0, min(1.0, cosine))
    return planet_radius * math.acos(cosine)


def latitude_band(
    latitude: float,
    distance: float,
    *,
    radius: float | None = None,
) -> tuple[float, float]:
    """Return the (min, max) latitude a point within ``distance`` can have."""
    planet_radius = settings.earth_radius_miles if radius is None else radius
    delta = math.degrees(distance / planet_radius)
    return max(MIN_LATITUDE, latitude - delta), min(MAX_LATITUDE, latitude + delta)


def validate_coordinates(latitude: float, longitude: float) -> dict[str, str]:
    """Return field errors for out-of-range or non-finite coordinates."""
    errors: dict[str, str] = {}
    if not math.isfinite(latitude) or not MIN_LATITUDE <= latitude <= MAX_LATITUDE:
        errors["latitude"] = "Latitude must be between -90 and 90"
    if not math.isfinite(longitude) or not MIN_LONGITUDE <= longitude <= MAX_LONGITUDE:
        errors["longitude"] = "Longitude must be between -180 and 180"
    return errors
