"""Handler that treats plain text as an edit instruction."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.types import BufferedInputFile, Message

from imagin.bot_service.context import BotContext
from imagin.services.orchestrator import OrchestratorBusyError
from imagin.services.states import EDIT_FAILED_MESSAGE, Failure, Success

logger = logging.getLogger(__name__)

BUSY = "Still working on the previous request, please wait."
EDIT_CAPTION = "Here is your edited image."

_EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}


def setup(router: Router, context: BotContext) -> None:
    """Register the free-text edit handler."""

    @router.message(F.text, ~F.text.startswith("/"))
    async def handle_instruction(message: Message) -> None:
        await process_instruction(message, context)


async def process_instruction(message: Message, context: BotContext) -> None:
    orchestrator = context.orchestrator_for(message.chat.id)
    try:
        state = await orchestrator.request_edit(message.text or "")
    except OrchestratorBusyError:
        await message.answer(BUSY)
        return

    if state is None:
        return
    if isinstance(state, Failure):
        await message.answer(state.message)
    elif isinstance(state, Success):
        try:
            image_bytes = state.result.to_bytes()
        except ValueError:
            logger.error("Edit result for chat %s is not valid base64", message.chat.id)
            await message.answer(EDIT_FAILED_MESSAGE)
            return
        extension = _EXTENSIONS.get(state.result.content_type, "png")
        photo = BufferedInputFile(image_bytes, filename=f"edited.{extension}")
        await message.answer_photo(photo, caption=EDIT_CAPTION)
