"""Handlers that turn incoming photos into normalized images."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message

from imagin.bot_service.context import BotContext
from imagin.imgproc.payload import RawImageFile
from imagin.services.states import Failure

logger = logging.getLogger(__name__)

IMAGE_READY = "Image ready. Send a prompt describing the edit."
DOWNLOAD_FAILED = "Could not download the photo from Telegram. Please try again."


def setup(router: Router, context: BotContext) -> None:
    """Register media upload handlers."""

    @router.message(F.photo)
    async def handle_photo(message: Message) -> None:
        await process_upload(message, context)

    @router.message(F.document.mime_type.startswith("image/"))
    async def handle_image_document(message: Message) -> None:
        await process_upload(message, context)


async def process_upload(message: Message, context: BotContext) -> None:
    """Download the largest photo (or image document) and upload it."""

    if message.photo:
        file_id = message.photo[-1].file_id
        content_type = "image/jpeg"
        filename = None
    else:
        file_id = message.document.file_id
        content_type = message.document.mime_type or ""
        filename = message.document.file_name

    try:
        file_info = await message.bot.get_file(file_id)
        file_stream = await message.bot.download_file(file_info.file_path)
    except TelegramAPIError as exc:
        logger.warning("Could not download photo for chat %s: %s", message.chat.id, exc)
        await message.answer(DOWNLOAD_FAILED)
        return

    data = file_stream.read()
    file_stream.close()

    orchestrator = context.orchestrator_for(message.chat.id)
    state = await orchestrator.upload(RawImageFile(data=data, content_type=content_type, filename=filename))
    if state is None:
        # A newer photo from this chat replaced this one.
        return
    if isinstance(state, Failure):
        await message.answer(state.message)
        return
    await message.answer(IMAGE_READY)
