"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "How to use this bot")
    ADD_SHOP = TelegramCommand("addshop", "Register a service shop (admin only)")
    FIND_SHOPS = TelegramCommand("findshops", "Search shops near a ZIP code")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> BotCommand | None:
    """Match "/name" or "/name@BotName" at the start of a message."""
    if not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0][1:]
    name = head.split("@", maxsplit=1)[0].lower()
    for entry in BotCommand:
        if entry.value.command == name:
            return entry
    return None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
