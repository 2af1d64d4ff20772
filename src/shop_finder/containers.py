"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from shop_finder.adapters.google_geocoding_client import HttpxGoogleGeocodingClient
from shop_finder.adapters.supabase_shop_repository import SupabaseShopRepository
from shop_finder.adapters.supabase_zip_repository import SupabaseZipRepository
from shop_finder.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from shop_finder.config import Settings, parse_admin_ids
from shop_finder.services.commands import StartCommandHandler
from shop_finder.services.conversation import ConversationService
from shop_finder.services.geocoding import GeocodeService
from shop_finder.services.session_store import InMemorySessionStore
from shop_finder.services.shops import ShopDirectory


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    start_command_handler: StartCommandHandler
    geocode_service: GeocodeService
    shop_directory: ShopDirectory
    conversation_service: ConversationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    geocoding_client = HttpxGoogleGeocodingClient.create(
        api_key=resolved_settings.geocoder_api_key,
        base_url=resolved_settings.geocoder_base_url,
    )
    geocode_service = GeocodeService(
        client=geocoding_client,
        repository=SupabaseZipRepository(supabase_client),
    )
    shop_directory = ShopDirectory(SupabaseShopRepository(supabase_client))
    conversation_service = ConversationService(
        session_store=InMemorySessionStore(),
        geocode_service=geocode_service,
        shop_directory=shop_directory,
        admin_ids=parse_admin_ids(resolved_settings.admin_ids),
    )
    start_handler = StartCommandHandler(telegram_client)

    async def close_resources() -> None:
        await telegram_client.close()
        await geocoding_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        start_command_handler=start_handler,
        geocode_service=geocode_service,
        shop_directory=shop_directory,
        conversation_service=conversation_service,
        close_resources=close_resources,
    )
