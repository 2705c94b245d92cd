"""Shared fixtures for the test-suite."""

from __future__ import annotations

from io import BytesIO
from typing import Any, Callable, Mapping

import pytest
from PIL import Image

from imagin.config.settings import get_settings
from imagin.imgproc.payload import RawImageFile


def _image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    color: Any = (200, 30, 30)
    if mode == "RGBA":
        color = (200, 30, 30, 128)
    elif mode in ("L", "P"):
        color = 120
    img = Image.new(mode, (width, height), color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    return _image_bytes


@pytest.fixture
def make_raw() -> Callable[..., RawImageFile]:
    def _make(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> RawImageFile:
        return RawImageFile(
            data=_image_bytes(width, height, fmt, mode),
            content_type=f"image/{fmt.lower()}",
            filename=f"upload.{fmt.lower()}",
        )

    return _make


@pytest.fixture
def gemini_response() -> Callable[..., Mapping[str, Any]]:
    def _response(data: str = "XYZ", mime_type: str = "image/png") -> Mapping[str, Any]:
        return {
            "candidates": [
                {"content": {"parts": [{"inlineData": {"data": data, "mimeType": mime_type}}]}},
            ],
        }

    return _response


@pytest.fixture(autouse=True)
def _setup_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini")
    monkeypatch.setenv("GEMINI_BASE_URL", "https://gemini.test/v1beta")
    monkeypatch.delenv("EDIT_REQUEST_TIMEOUT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
