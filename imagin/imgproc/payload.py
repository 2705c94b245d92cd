"""Image value objects and data-URI helpers shared by the pipeline."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

JPEG_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True, slots=True)
class RawImageFile:
    """Binary blob supplied by the user together with its declared type."""

    data: bytes
    content_type: str = ""
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedImage:
    """Resized and re-encoded image ready to be sent to the edit service."""

    encoded_payload: str
    content_type: str
    width: int
    height: int

    @property
    def base64_data(self) -> str:
        """Return the base64 part of the data URI."""

        _, encoded = split_data_url(self.encoded_payload)
        return encoded


@dataclass(frozen=True, slots=True)
class EditResult:
    """Image returned by the edit service.

    ``encoded_payload`` holds the base64 data exactly as the service sent it.
    """

    encoded_payload: str
    content_type: str

    @property
    def data_url(self) -> str:
        return to_data_url(self.content_type, self.encoded_payload)

    def to_bytes(self) -> bytes:
        """Decode the payload; raises ``ValueError`` on malformed base64."""

        try:
            return base64.b64decode(self.encoded_payload, validate=True)
        except binascii.Error as exc:
            raise ValueError("Edit result payload is not valid base64.") from exc


def to_data_url(content_type: str, encoded: str) -> str:
    """Build a ``data:`` URI from a content type and base64 data."""

    return f"data:{content_type};base64,{encoded}"


def split_data_url(url: str) -> tuple[str, str]:
    """Return ``(content_type, base64_data)`` from a base64 data URI."""

    if not url.startswith("data:") or "," not in url:
        raise ValueError("Not a data URI.")
    header, encoded = url.split(",", 1)
    meta = header[len("data:"):]
    if not meta.endswith(";base64"):
        raise ValueError("Data URI is not base64 encoded.")
    return meta[: -len(";base64")], encoded
