"""Supabase-backed ZIP coordinate cache."""

from dataclasses import dataclass

from supabase import Client

from shop_finder.domain.geo import Coordinate
from shop_finder.services.geocoding import ZipRepository


@dataclass
class SupabaseZipRepository(ZipRepository):
    """Supabase implementation of the ZIP coordinate cache."""

    client: Client

    def get_coordinate(self, zip_code: str) -> Coordinate | None:
        """Return the cached coordinate for a ZIP code, if present."""
        response = (
            self.client.table("zips")
            .select("zip, lat, lon")
            .eq("zip", zip_code)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Coordinate(lat=float(row["lat"]), lon=float(row["lon"]))

    def save_coordinate(self, zip_code: str, coordinate: Coordinate) -> None:
        """Cache a coordinate; the first stored value for a ZIP wins."""
        self.client.table("zips").upsert(
            {"zip": zip_code, "lat": coordinate.lat, "lon": coordinate.lon},
            on_conflict="zip",
            ignore_duplicates=True,
        ).execute()
