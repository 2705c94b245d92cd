"""Image normalisation helpers."""

from __future__ import annotations

import asyncio
import base64
import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from imagin.imgproc.payload import JPEG_CONTENT_TYPE, NormalizedImage, RawImageFile, to_data_url

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 1024
DEFAULT_JPEG_QUALITY = 90


class ImageProcessingError(RuntimeError):
    """Raised when an uploaded file cannot be turned into a normalized image."""


class DecodeError(ImageProcessingError):
    """The bytes are not a supported image or are corrupt."""


class RenderContextError(ImageProcessingError):
    """Resampling or re-encoding the decoded image failed."""


def _round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounding .5 upwards, like a browser's Math.round."""

    return (2 * numerator + denominator) // (2 * denominator)


def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Return the bounded size for ``width`` x ``height``; never upscales."""

    longest = max(width, height)
    if longest <= max_dimension:
        return width, height
    if width >= height:
        return max_dimension, max(1, _round_half_up(height * max_dimension, width))
    return max(1, _round_half_up(width * max_dimension, height)), max_dimension


class ImageNormalizer:
    """Ensures consistent orientation, bounded size and JPEG encoding."""

    def __init__(
        self,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> None:
        if max_dimension < 1:
            raise ValueError("max_dimension must be positive.")
        self._max_dimension = max_dimension
        self._jpeg_quality = jpeg_quality

    @property
    def max_dimension(self) -> int:
        return self._max_dimension

    async def normalize(self, raw: RawImageFile) -> NormalizedImage:
        """Normalize ``raw`` in a worker thread so the event loop stays free."""

        return await asyncio.to_thread(self.normalize_sync, raw)

    def normalize_sync(self, raw: RawImageFile) -> NormalizedImage:
        """Return processed image ready for the edit service."""

        img = self._decode(raw)
        try:
            width, height = img.size
            new_size = target_size(width, height, self._max_dimension)
            encoded = self._render_jpeg(img, new_size)
        finally:
            img.close()

        logger.debug(
            "Normalized %s (%s) from %dx%d to %dx%d, %d bytes",
            raw.filename or "upload",
            raw.content_type or "unknown type",
            width,
            height,
            new_size[0],
            new_size[1],
            len(encoded),
        )
        return NormalizedImage(
            encoded_payload=to_data_url(JPEG_CONTENT_TYPE, base64.b64encode(encoded).decode("ascii")),
            content_type=JPEG_CONTENT_TYPE,
            width=new_size[0],
            height=new_size[1],
        )

    def _decode(self, raw: RawImageFile) -> Image.Image:
        if not raw.data:
            raise DecodeError("Uploaded file is empty.")
        try:
            img = Image.open(BytesIO(raw.data))
            img.load()
            # Natural size is the displayed one, after EXIF rotation.
            return ImageOps.exif_transpose(img)
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Unsupported image file: {exc}") from exc
        except (OSError, ValueError, SyntaxError) as exc:
            raise DecodeError(f"Corrupt image file: {exc}") from exc

    def _render_jpeg(self, img: Image.Image, size: tuple[int, int]) -> bytes:
        try:
            rgb = _flatten(img)
            if rgb.size != size:
                rgb = rgb.resize(size, Image.Resampling.LANCZOS)
            buffer = BytesIO()
            rgb.save(buffer, format="JPEG", quality=self._jpeg_quality)
        except (OSError, ValueError, MemoryError) as exc:
            raise RenderContextError(f"Could not render image: {exc}") from exc
        return buffer.getvalue()


def _flatten(img: Image.Image) -> Image.Image:
    """Drop alpha and palettes; JPEG only stores RGB."""

    if img.mode == "RGB":
        return img
    if img.mode == "P" and "transparency" in img.info:
        img = img.convert("RGBA")
    if img.mode in ("RGBA", "LA", "PA"):
        # Transparent pixels become black, as on a canvas export.
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (0, 0, 0))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return img.convert("RGB")
