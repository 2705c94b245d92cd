"""Register message and command handlers."""

from __future__ import annotations

from aiogram import Router

from imagin.bot_service.context import BotContext

from . import edit, start, upload


def setup_handlers(router: Router, context: BotContext) -> None:
    """Attach all handler groups to the provided router."""

    start.setup(router, context)
    upload.setup(router, context)
    edit.setup(router, context)
