"""Shared test fixtures."""

import math
from dataclasses import dataclass, field

import pytest

from shop_finder.adapters.google_geocoding_client import GeocodingClient
from shop_finder.adapters.telegram_client import TelegramClient
from shop_finder.config import Settings
from shop_finder.containers import AppContainer
from shop_finder.domain.geo import EARTH_RADIUS_MILES, Coordinate
from shop_finder.domain.shops import NewShop, ShopRecord
from shop_finder.services.commands import StartCommandHandler
from shop_finder.services.conversation import ConversationService
from shop_finder.services.geocoding import GeocodeService, ZipRepository
from shop_finder.services.session_store import InMemorySessionStore
from shop_finder.services.shops import ShopDirectory, ShopRepository

ADMIN_USER_ID = 1001
SF_COORDINATE = Coordinate(lat=37.79, lon=-122.40)


def coordinate_north_of(origin: Coordinate, miles: float) -> Coordinate:
    """Return a point due north of ``origin`` at the given great-circle distance."""
    return Coordinate(
        lat=origin.lat + math.degrees(miles / EARTH_RADIUS_MILES), lon=origin.lon
    )


def ok_payload(coordinate: Coordinate) -> dict[str, object]:
    return {
        "status": "OK",
        "results": [
            {"geometry": {"location": {"lat": coordinate.lat, "lng": coordinate.lon}}}
        ],
    }


@dataclass
class FakeGeocodingClient(GeocodingClient):
    """Fake geocoding client with canned responses keyed by address."""

    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def geocode(self, address: str) -> dict[str, object]:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.payloads.get(address, {"status": "ZERO_RESULTS", "results": []})


@dataclass
class InMemoryZipRepository(ZipRepository):
    """In-memory ZIP coordinate cache for tests."""

    coordinates: dict[str, Coordinate] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get_coordinate(self, zip_code: str) -> Coordinate | None:
        return self.coordinates.get(zip_code)

    def save_coordinate(self, zip_code: str, coordinate: Coordinate) -> None:
        self.writes.append(zip_code)
        self.coordinates.setdefault(zip_code, coordinate)


@dataclass
class InMemoryShopRepository(ShopRepository):
    """In-memory shop repository for tests."""

    shops: list[ShopRecord] = field(default_factory=list)
    type_queries: list[str] = field(default_factory=list)
    fail_inserts: bool = False

    def insert_shop(self, shop: NewShop) -> ShopRecord:
        if self.fail_inserts:
            raise RuntimeError("insert failed")
        record = ShopRecord(
            id=len(self.shops) + 1,
            name=shop.name,
            street=shop.street,
            city=shop.city,
            state=shop.state,
            zip_code=shop.zip_code,
            shop_type=shop.shop_type,
            lat=shop.coordinate.lat,
            lon=shop.coordinate.lon,
        )
        self.shops.append(record)
        return record

    def list_by_type(self, shop_type: str) -> list[ShopRecord]:
        self.type_queries.append(shop_type)
        return [shop for shop in self.shops if shop.shop_type == shop_type]

    def add(
        self,
        name: str,
        shop_type: str,
        coordinate: Coordinate,
        street: str = "1 Main St",
    ) -> ShopRecord:
        return self.insert_shop(
            NewShop(
                name=name,
                street=street,
                city="San Francisco",
                state="CA",
                zip_code="94105",
                shop_type=shop_type,
                coordinate=coordinate,
            )
        )


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    sent: list[dict[str, object]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        self.messages.append((chat_id, text))
        self.sent.append(
            {
                "chat_id": chat_id,
                "text": text,
                "reply_markup": reply_markup,
                "parse_mode": parse_mode,
            }
        )

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        admin_ids=str(ADMIN_USER_ID),
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        geocoder_api_key="geo-key",
    )


@pytest.fixture
def geocoding_client() -> FakeGeocodingClient:
    return FakeGeocodingClient(payloads={"94105": ok_payload(SF_COORDINATE)})


@pytest.fixture
def zip_repository() -> InMemoryZipRepository:
    return InMemoryZipRepository()


@pytest.fixture
def shop_repository() -> InMemoryShopRepository:
    return InMemoryShopRepository()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def conversation_service(
    geocoding_client: FakeGeocodingClient,
    zip_repository: InMemoryZipRepository,
    shop_repository: InMemoryShopRepository,
    session_store: InMemorySessionStore,
) -> ConversationService:
    return ConversationService(
        session_store=session_store,
        geocode_service=GeocodeService(
            client=geocoding_client, repository=zip_repository
        ),
        shop_directory=ShopDirectory(shop_repository),
        admin_ids=frozenset({ADMIN_USER_ID}),
    )


@pytest.fixture
def container(
    settings: Settings,
    telegram_client: FakeTelegramClient,
    conversation_service: ConversationService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        start_command_handler=StartCommandHandler(telegram_client),
        geocode_service=conversation_service.geocode_service,
        shop_directory=conversation_service.shop_directory,
        conversation_service=conversation_service,
        close_resources=close_resources,
    )
