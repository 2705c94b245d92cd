"""Start and reset command handlers."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from imagin.bot_service.context import BotContext

GREETING = (
    "Hi! Send me a photo, then describe the change you want to see, "
    "e.g. 'make the sky purple' or 'add a dog'."
)
RESET_DONE = "Image cleared. Send a new photo to start again."


def setup(router: Router, context: BotContext) -> None:
    """Register /start and /reset handlers."""

    @router.message(CommandStart())
    async def handle_start(message: Message) -> None:
        context.orchestrator_for(message.chat.id)
        await message.answer(GREETING)

    @router.message(Command("reset"))
    async def handle_reset(message: Message) -> None:
        await process_reset(message, context)


async def process_reset(message: Message, context: BotContext) -> None:
    """Drop the chat's session so its image is released."""

    orchestrator = context.sessions.get(str(message.chat.id))
    if orchestrator is not None:
        orchestrator.reset()
        context.sessions.drop(str(message.chat.id))
    await message.answer(RESET_DONE)
