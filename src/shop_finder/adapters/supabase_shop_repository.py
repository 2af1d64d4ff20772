"""Supabase-backed shop repository."""

from dataclasses import dataclass

from supabase import Client

from shop_finder.domain.shops import NewShop, ShopRecord
from shop_finder.services.shops import ShopRepository

_SHOP_COLUMNS = "id, name, street, city, state, zip, type, lat, lon"


@dataclass
class SupabaseShopRepository(ShopRepository):
    """Supabase implementation for shop persistence."""

    client: Client

    def insert_shop(self, shop: NewShop) -> ShopRecord:
        """Insert a shop row and return the stored record."""
        response = (
            self.client.table("shops")
            .insert(
                {
                    "name": shop.name,
                    "street": shop.street,
                    "city": shop.city,
                    "state": shop.state,
                    "zip": shop.zip_code,
                    "type": shop.shop_type,
                    "lat": shop.coordinate.lat,
                    "lon": shop.coordinate.lon,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shop in Supabase")
        return _to_record(response.data[0])

    def list_by_type(self, shop_type: str) -> list[ShopRecord]:
        """Return shops of a type ordered by id."""
        response = (
            self.client.table("shops")
            .select(_SHOP_COLUMNS)
            .eq("type", shop_type)
            .order("id")
            .execute()
        )
        return [_to_record(row) for row in response.data or []]


def _to_record(row: dict[str, object]) -> ShopRecord:
    return ShopRecord(
        id=int(row["id"]),
        name=row["name"],
        street=row.get("street") or "",
        city=row.get("city") or "",
        state=row.get("state") or "",
        zip_code=row.get("zip") or "",
        shop_type=row.get("type") or "",
        lat=float(row["lat"]),
        lon=float(row["lon"]),
    )
