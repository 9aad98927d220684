"""Reverse geocoding adapter.

Turns post coordinates into human-readable place names using the Google
Geocoding API. Enrichment is best-effort: a missing API key, a network error
or an unexpected payload yields ``None`` and never fails the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from huddle.core.errors import GeocodingError
from huddle.core.settings import settings
from huddle.schemas.post import PlaceNames

logger = logging.getLogger(__name__)

GEOCODE_PATH = "/maps/api/geocode/json"
STATUS_OK = "OK"

# Address component types, in order of preference, for each place field.
NEIGHBORHOOD_TYPES = ("neighborhood",)
LOCALITY_TYPES = ("locality", "postal_town")
DISTRICT_TYPES = ("sublocality", "sublocality_level_1", "administrative_area_level_2")


@dataclass(frozen=True)
class GeocodingConfig:
    """Immutable configuration for the geocoding client."""

    api_key: str | None
    base_url: str
    timeout_seconds: float

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


def load_geocoding_config() -> GeocodingConfig:
    """Build configuration object from global settings."""
    return GeocodingConfig(
        api_key=settings.geocoding_api_key,
        base_url=settings.geocoding_base_url,
        timeout_seconds=float(settings.geocoding_timeout_seconds),
    )


def _first_component(
    components: Iterable[Mapping[str, Any]], wanted: tuple[str, ...]
) -> str | None:
    by_type: dict[str, str] = {}
    for component in components:
        name = component.get("long_name")
        if not isinstance(name, str) or not name:
            continue
        for type_ in component.get("types", ()):
            by_type.setdefault(type_, name)
    for type_ in wanted:
        if type_ in by_type:
            return by_type[type_]
    return None


def parse_place_names(payload: Mapping[str, Any]) -> PlaceNames | None:
    """Extract place names from a Geocoding API response body.

    Raises:
        GeocodingError: If the response status is not ``OK``.
    """
    status = payload.get("status")
    if status != STATUS_OK:
        raise GeocodingError(f"Geocoding status {status!r}")
    components: list[Mapping[str, Any]] = []
    for result in payload.get("results") or []:
        components.extend(result.get("address_components") or [])
    place = PlaceNames(
        neighborhood=_first_component(components, NEIGHBORHOOD_TYPES),
        locality=_first_component(components, LOCALITY_TYPES),
        district=_first_component(components, DISTRICT_TYPES),
    )
    return None if place.is_empty else place


class GeocodingClient:
    """HTTP client wrapper for reverse geocoding lookups."""

    def __init__(
        self,
        config: GeocodingConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or load_geocoding_config()
        self._client = client
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                )
        return self._client

    async def reverse(self, latitude: float, longitude: float) -> PlaceNames | None:
        """Return place names for the coordinates, or None when unavailable."""
        if not self.enabled:
            logger.debug("Geocoding API key not configured; skipping enrichment")
            return None
        try:
            client = await self._ensure_client()
            response = await client.get(
                GEOCODE_PATH,
                params={"latlng": f"{latitude},{longitude}", "key": self.config.api_key},
            )
            response.raise_for_status()
            return parse_place_names(response.json())
        except httpx.HTTPError as exc:
            logger.warning("Geocoding request failed: %s", exc)
        except GeocodingError as exc:
            logger.warning("Geocoding returned no usable result: %s", exc)
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Geocoding response could not be parsed: %s", exc, exc_info=True)
        return None

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class _GeocodingClientSingleton:
    _instance: GeocodingClient | None = None

    @classmethod
    def get_instance(cls) -> GeocodingClient:
        if cls._instance is None:
            cls._instance = GeocodingClient()
        return cls._instance


def get_geocoding_client() -> GeocodingClient:
    """Return a singleton geocoding client instance."""
    return _GeocodingClientSingleton.get_instance()
