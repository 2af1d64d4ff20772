"""Google Geocoding API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_GEOCODER_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodingClient(Protocol):
    """Interface for external geocoding lookups."""

    async def geocode(self, address: str) -> dict[str, object]:
        """Look up an address and return the raw API response."""


@dataclass
class HttpxGoogleGeocodingClient(GeocodingClient):
    """HTTPX-backed Google Geocoding client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, base_url: str = DEFAULT_GEOCODER_URL
    ) -> "HttpxGoogleGeocodingClient":
        """Create a geocoding client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def geocode(self, address: str) -> dict[str, object]:
        """Geocode a free-form address such as a ZIP code."""
        response = await self.http_client.get(
            self.base_url,
            params={"address": address, "key": self.api_key},
            timeout=None,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
