"""Default observer location derived from the caller's IP address."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass

import httpx

from huddle.core.settings import settings
from huddle.schemas.location import ObserverLocation

logger = logging.getLogger(__name__)

LOOKUP_FIELDS = "status,message,lat,lon,city,country"

# Local development defaults to Los Angeles; failed lookups fall back to London.
LOCAL_DEFAULT = ObserverLocation(
    latitude=34.0522,
    longitude=-118.2437,
    city="Los Angeles",
    country="USA",
    source="default",
)
FALLBACK_DEFAULT = ObserverLocation(
    latitude=51.505,
    longitude=-0.09,
    city="London",
    country="UK",
    source="fallback",
)


@dataclass(frozen=True)
class IpLocatorConfig:
    """Immutable configuration for IP geolocation lookups."""

    base_url: str
    timeout_seconds: float


def load_ip_locator_config() -> IpLocatorConfig:
    """Build configuration object from global settings."""
    return IpLocatorConfig(
        base_url=settings.ip_geolocation_base_url,
        timeout_seconds=float(settings.ip_geolocation_timeout_seconds),
    )


def is_local_address(ip: str | None) -> bool:
    """Return True for loopback, private or unparsable client addresses."""
    if not ip or ip == "localhost":
        return True
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return True
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped
    return address.is_loopback or address.is_private or address.is_link_local


class IpLocator:
    """Looks up approximate coordinates for a client IP via ip-api.com."""

    def __init__(
        self,
        config: IpLocatorConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_ip_locator_config()
        self._transport = transport

    async def locate(self, ip: str | None) -> ObserverLocation:
        """Return the best-known location for ``ip``; never raises."""
        if is_local_address(ip):
            return LOCAL_DEFAULT
        try:
            async with httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(self.config.timeout_seconds),
                transport=self._transport,
            ) as client:
                response = await client.get(f"/json/{ip}", params={"fields": LOOKUP_FIELDS})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("IP geolocation failed for %s: %s", ip, exc)
            return FALLBACK_DEFAULT

        if data.get("status") != "success":
            logger.info("IP geolocation had no result for %s: %s", ip, data.get("message"))
            return FALLBACK_DEFAULT
        try:
            return ObserverLocation(
                latitude=float(data["lat"]),
                longitude=float(data["lon"]),
                city=data.get("city"),
                country=data.get("country"),
                source="ip",
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("IP geolocation payload malformed for %s: %s", ip, exc)
            return FALLBACK_DEFAULT


def get_ip_locator() -> IpLocator:
    """Return a new IP locator."""
    return IpLocator()
