"""Domain models for service shops."""

from dataclasses import dataclass

from shop_finder.domain.geo import Coordinate

SERVICE_TYPES = ("tire shop", "body shop", "truck repair", "towing", "roadside")


@dataclass(frozen=True)
class NewShop:
    """A fully collected shop that has not been stored yet."""

    name: str
    street: str
    city: str
    state: str
    zip_code: str
    shop_type: str
    coordinate: Coordinate


@dataclass(frozen=True)
class ShopRecord:
    """Represents a shop stored in the directory."""

    id: int
    name: str
    street: str
    city: str
    state: str
    zip_code: str
    shop_type: str
    lat: float
    lon: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon)


@dataclass(frozen=True)
class RankedShop:
    """A search hit with its distance from the query point."""

    shop: ShopRecord
    distance_miles: float


def normalize_shop_type(raw: str) -> str:
    """Normalize free-text service type input."""
    return raw.lower()
