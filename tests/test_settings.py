"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from imagin.config.settings import get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEMINI_IMAGE_MODEL", "MAX_IMAGE_DIMENSION", "JPEG_QUALITY", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.gemini_image_model == "gemini-2.5-flash-image"
    assert settings.max_image_dimension == 1024
    assert settings.jpeg_quality == 90
    assert settings.request_timeout is None
    assert settings.environment == "dev"


def test_overrides_and_api_key_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "fallback-key")
    monkeypatch.setenv("MAX_IMAGE_DIMENSION", "512")
    monkeypatch.setenv("EDIT_REQUEST_TIMEOUT", "30")

    settings = get_settings()

    assert settings.gemini_api_key == "fallback-key"
    assert settings.max_image_dimension == 512
    assert settings.request_timeout == 30.0


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()
