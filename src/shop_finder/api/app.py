"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from shop_finder.api.telegram_models import TelegramUpdate
from shop_finder.app_logging import configure_logging
from shop_finder.containers import AppContainer
from shop_finder.services.conversation import DialogPrompt
from shop_finder.telegram_commands import (
    CHAT_MENU_BUTTON,
    BotCommand,
    parse_command,
    telegram_commands,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None or not message.text:
            return {"status": "ok"}
        chat_id = message.chat.id
        conversation = state_container.conversation_service

        command = parse_command(message.text)
        if command is BotCommand.START:
            await state_container.start_command_handler.handle(chat_id=chat_id)
            return {"status": "ok"}
        if command is BotCommand.ADD_SHOP:
            user_id = message.from_user.id if message.from_user else None
            if user_id is None:
                return {"status": "ok"}
            await _send_prompt(
                state_container, chat_id, conversation.start_add_shop(chat_id, user_id)
            )
            return {"status": "ok"}
        if command is BotCommand.FIND_SHOPS:
            await _send_prompt(
                state_container, chat_id, conversation.start_find_shops(chat_id)
            )
            return {"status": "ok"}

        prompt = await conversation.handle_text(chat_id, message.text)
        if prompt:
            await _send_prompt(state_container, chat_id, prompt)
        return {"status": "ok"}

    return app


async def _send_prompt(
    state_container: AppContainer, chat_id: int, prompt: DialogPrompt
) -> None:
    await state_container.telegram_client.send_message(
        chat_id=chat_id,
        text=prompt.text,
        reply_markup=prompt.reply_markup,
        parse_mode=prompt.parse_mode,
    )
