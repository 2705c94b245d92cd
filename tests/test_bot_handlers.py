"""Tests for the Telegram handler helpers."""

from __future__ import annotations

import base64
from io import BytesIO

import pytest
from aiogram.exceptions import TelegramBadRequest

from imagin.bot_service.context import BotContext
from imagin.bot_service.handlers.edit import BUSY, EDIT_CAPTION, process_instruction
from imagin.bot_service.handlers.start import RESET_DONE, process_reset
from imagin.bot_service.handlers.upload import DOWNLOAD_FAILED, IMAGE_READY, process_upload
from imagin.imgproc.normalize import ImageNormalizer
from imagin.services.sessions import SessionRegistry


@pytest.fixture
def service(mocker, gemini_response):
    fake = mocker.Mock()
    encoded = base64.b64encode(b"edited-bytes").decode("ascii")
    fake.edit_image = mocker.AsyncMock(return_value=gemini_response(encoded, "image/png"))
    return fake


@pytest.fixture
def context(service) -> BotContext:
    return BotContext(sessions=SessionRegistry(ImageNormalizer(256), service))


def _message(mocker, *, chat_id: int = 42, text: str | None = None, photo_bytes: bytes | None = None):
    message = mocker.Mock()
    message.chat.id = chat_id
    message.text = text
    message.answer = mocker.AsyncMock()
    message.answer_photo = mocker.AsyncMock()
    if photo_bytes is not None:
        message.photo = [mocker.Mock(file_id="small"), mocker.Mock(file_id="large")]
        message.bot.get_file = mocker.AsyncMock(return_value=mocker.Mock(file_path="photos/large.jpg"))
        message.bot.download_file = mocker.AsyncMock(return_value=BytesIO(photo_bytes))
    else:
        message.photo = None
    return message


@pytest.mark.asyncio
async def test_photo_upload_prepares_image(mocker, context, make_image_bytes) -> None:
    message = _message(mocker, photo_bytes=make_image_bytes(600, 300, "JPEG"))

    await process_upload(message, context)

    message.bot.get_file.assert_awaited_once_with("large")
    message.answer.assert_awaited_once_with(IMAGE_READY)
    image = context.orchestrator_for(42).state.image
    assert (image.width, image.height) == (256, 128)


@pytest.mark.asyncio
async def test_broken_photo_reports_processing_error(mocker, context) -> None:
    message = _message(mocker, photo_bytes=b"broken")

    await process_upload(message, context)

    message.answer.assert_awaited_once_with("Could not process image. Please try another file.")


@pytest.mark.asyncio
async def test_text_without_image_asks_for_upload(mocker, context, service) -> None:
    message = _message(mocker, text="add a dog")

    await process_instruction(message, context)

    message.answer.assert_awaited_once_with("Please upload an image and enter a prompt.")
    service.edit_image.assert_not_called()


@pytest.mark.asyncio
async def test_instruction_sends_edited_photo(mocker, context, make_image_bytes) -> None:
    await process_upload(_message(mocker, photo_bytes=make_image_bytes(64, 64, "JPEG")), context)
    message = _message(mocker, text="add a dog")

    await process_instruction(message, context)

    message.answer_photo.assert_awaited_once()
    photo = message.answer_photo.await_args.args[0]
    assert photo.data == b"edited-bytes"
    assert photo.filename == "edited.png"
    assert message.answer_photo.await_args.kwargs["caption"] == EDIT_CAPTION


@pytest.mark.asyncio
async def test_instruction_while_busy(mocker, context) -> None:
    orchestrator = context.orchestrator_for(42)
    mocker.patch.object(type(orchestrator), "is_loading", new_callable=mocker.PropertyMock, return_value=True)
    message = _message(mocker, text="add a dog")

    await process_instruction(message, context)

    message.answer.assert_awaited_once_with(BUSY)


@pytest.mark.asyncio
async def test_rejected_download_is_reported(mocker, context) -> None:
    message = _message(mocker, photo_bytes=b"")
    message.bot.get_file.side_effect = TelegramBadRequest(method=mocker.Mock(), message="file is too big")

    await process_upload(message, context)

    message.answer.assert_awaited_once_with(DOWNLOAD_FAILED)


@pytest.mark.asyncio
async def test_overtaken_upload_sends_no_reply(mocker, context, make_image_bytes) -> None:
    orchestrator = context.orchestrator_for(42)
    mocker.patch.object(orchestrator, "upload", mocker.AsyncMock(return_value=None))
    message = _message(mocker, photo_bytes=make_image_bytes(32, 32, "JPEG"))

    await process_upload(message, context)

    message.answer.assert_not_called()


@pytest.mark.asyncio
async def test_reset_drops_chat_session(mocker, context, make_image_bytes) -> None:
    await process_upload(_message(mocker, photo_bytes=make_image_bytes(32, 32, "JPEG")), context)
    assert len(context.sessions) == 1
    message = _message(mocker)

    await process_reset(message, context)

    assert len(context.sessions) == 0
    assert context.sessions.get("42") is None
    message.answer.assert_awaited_once_with(RESET_DONE)
