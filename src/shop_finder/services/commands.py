"""Command handlers for Telegram updates."""

from dataclasses import dataclass

from shop_finder.adapters.telegram_client import TelegramClient

WELCOME_TEXT = (
    "Welcome!\n"
    "Use /addshop to register a service shop (admin only).\n"
    "Use /findshops to search shops by ZIP code."
)


@dataclass
class StartCommandHandler:
    """Handle the /start Telegram command."""

    telegram_client: TelegramClient

    async def handle(self, chat_id: int) -> None:
        """Send the welcome message."""
        await self.telegram_client.send_message(chat_id=chat_id, text=WELCOME_TEXT)
