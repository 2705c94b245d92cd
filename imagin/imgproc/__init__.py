"""Image ingestion: decoding, bounded resizing and JPEG re-encoding."""

from .normalize import DecodeError, ImageNormalizer, ImageProcessingError, RenderContextError
from .payload import EditResult, NormalizedImage, RawImageFile, split_data_url, to_data_url

__all__ = [
    "DecodeError",
    "EditResult",
    "ImageNormalizer",
    "ImageProcessingError",
    "NormalizedImage",
    "RawImageFile",
    "RenderContextError",
    "split_data_url",
    "to_data_url",
]
