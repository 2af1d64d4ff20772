"""Postal code geocoding with a persistent cache."""

import logging
from dataclasses import dataclass
from typing import Protocol

from shop_finder.adapters.google_geocoding_client import GeocodingClient
from shop_finder.domain.geo import Coordinate

_logger = logging.getLogger(__name__)


class ZipRepository(Protocol):
    """Persistence interface for cached ZIP coordinates."""

    def get_coordinate(self, zip_code: str) -> Coordinate | None:
        """Return the cached coordinate for a ZIP code, if present."""

    def save_coordinate(self, zip_code: str, coordinate: Coordinate) -> None:
        """Cache a coordinate for a ZIP code; an existing entry is kept."""


@dataclass(frozen=True)
class GeocodeFound:
    coordinate: Coordinate
    cached: bool = False


@dataclass(frozen=True)
class GeocodeNotFound:
    status: str


@dataclass(frozen=True)
class GeocodeTransportError:
    detail: str


GeocodeResult = GeocodeFound | GeocodeNotFound | GeocodeTransportError


@dataclass
class GeocodeService:
    """Resolve ZIP codes, hitting the external lookup only on a cache miss."""

    client: GeocodingClient
    repository: ZipRepository

    async def resolve(self, zip_code: str) -> GeocodeResult:
        """Resolve a ZIP code to coordinates.

        Cache reads and writes propagate storage errors. Failures of the
        external lookup itself are returned as ``GeocodeTransportError``.
        """
        key = zip_code.strip()
        cached = self.repository.get_coordinate(key)
        if cached is not None:
            return GeocodeFound(coordinate=cached, cached=True)

        try:
            payload = await self.client.geocode(key)
            coordinate, status = _first_location(payload)
        except Exception as exc:
            _logger.warning("Geocoding request failed for zip=%s: %s", key, exc)
            return GeocodeTransportError(detail=f"{type(exc).__name__}: {exc}")

        if coordinate is None:
            _logger.info("Geocoding found nothing for zip=%s (status=%s)", key, status)
            return GeocodeNotFound(status=status)

        self.repository.save_coordinate(key, coordinate)
        return GeocodeFound(coordinate=coordinate)


def _first_location(payload: dict[str, object]) -> tuple[Coordinate | None, str]:
    """Extract the first candidate location from a geocoding response."""
    status = str(payload.get("status", "UNKNOWN"))
    results = payload.get("results") or []
    if status != "OK" or not results:
        return None, status
    location = results[0]["geometry"]["location"]
    return Coordinate(lat=float(location["lat"]), lon=float(location["lng"])), status
