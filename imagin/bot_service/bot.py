"""Entrypoint for the Telegram bot."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from aiogram import Bot, Dispatcher, Router

from imagin.bot_service.context import BotContext
from imagin.bot_service.handlers import setup_handlers
from imagin.config.settings import get_settings
from imagin.imggen.edit_client import GeminiEditClient
from imagin.imgproc.normalize import ImageNormalizer
from imagin.monitoring.logging import configure_logging
from imagin.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)


async def main() -> None:
    """Initialise dependencies and start polling Telegram."""

    configure_logging()

    settings = get_settings()
    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured.")

    client = GeminiEditClient(settings)
    normalizer = ImageNormalizer(settings.max_image_dimension, settings.jpeg_quality)
    context = BotContext(sessions=SessionRegistry(normalizer, client))

    bot = Bot(token=settings.telegram_bot_token)
    dispatcher = Dispatcher()
    router = Router()
    setup_handlers(router, context)
    dispatcher.include_router(router)

    try:
        logger.info("Starting bot polling.")
        await dispatcher.start_polling(bot)
    finally:
        with suppress(Exception):
            await bot.session.close()
        with suppress(Exception):
            await client.close()


if __name__ == "__main__":
    asyncio.run(main())
