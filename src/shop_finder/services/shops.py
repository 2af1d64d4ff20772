"""Shop directory service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from shop_finder.domain.shops import NewShop, ShopRecord

_logger = logging.getLogger(__name__)


class ShopRepository(Protocol):
    """Persistence interface for shops."""

    def insert_shop(self, shop: NewShop) -> ShopRecord:
        """Store a new shop and return it with its generated id."""

    def list_by_type(self, shop_type: str) -> list[ShopRecord]:
        """Return shops with an exact type match, in storage order."""


@dataclass
class ShopDirectory:
    """Application service for registering and looking up shops."""

    repository: ShopRepository

    def add_shop(self, shop: NewShop) -> ShopRecord:
        """Persist a shop collected through the add-shop dialog."""
        record = self.repository.insert_shop(shop)
        _logger.info(
            "Shop added: id=%s type=%s zip=%s",
            record.id,
            record.shop_type,
            shop.zip_code,
        )
        return record

    def find_by_type(self, shop_type: str) -> list[ShopRecord]:
        """Return all shops of the given normalized type."""
        return self.repository.list_by_type(shop_type)
