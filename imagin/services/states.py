"""Editor states and the error kinds a failed action can leave behind."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from imagin.imgproc.payload import EditResult, NormalizedImage

IMAGE_PROCESSING_MESSAGE = "Could not process image. Please try another file."
VALIDATION_MESSAGE = "Please upload an image and enter a prompt."
EDIT_FAILED_MESSAGE = "Failed to edit image. Please check the prompt or try again."


class ErrorKind(str, Enum):
    """Why the last action failed."""

    IMAGE_PROCESSING = "image_processing"
    VALIDATION = "validation"
    EMPTY_RESPONSE = "empty_response"
    SERVICE = "service"

    @property
    def category(self) -> str:
        """User-facing category; empty responses and service errors collapse."""

        if self in (ErrorKind.EMPTY_RESPONSE, ErrorKind.SERVICE):
            return "edit_failed"
        return self.value

    @property
    def user_message(self) -> str:
        return _MESSAGES[self.category]


_MESSAGES = {
    "image_processing": IMAGE_PROCESSING_MESSAGE,
    "validation": VALIDATION_MESSAGE,
    "edit_failed": EDIT_FAILED_MESSAGE,
}


class Phase(str, Enum):
    NORMALIZE = "normalize"
    EDIT = "edit"


@dataclass(frozen=True, slots=True)
class Idle:
    """No image uploaded yet."""


@dataclass(frozen=True, slots=True)
class Ready:
    """Image normalized; no edit result to show."""

    image: NormalizedImage


@dataclass(frozen=True, slots=True)
class Loading:
    """A normalize or edit request is in flight.

    ``image`` is the image being edited during the edit phase. While a new
    upload is normalized it is the previously loaded image, which stays on
    screen until the new one replaces it.
    """

    phase: Phase
    image: NormalizedImage | None = None


@dataclass(frozen=True, slots=True)
class Success:
    image: NormalizedImage
    result: EditResult


@dataclass(frozen=True, slots=True)
class Failure:
    """The last action failed.

    A rejected edit request leaves the image and any earlier result in place,
    so ``result`` is only set for validation failures raised after a success.
    """

    kind: ErrorKind
    image: NormalizedImage | None = None
    result: EditResult | None = None

    @property
    def message(self) -> str:
        return self.kind.user_message


EditorState = Union[Idle, Ready, Loading, Success, Failure]


def current_image(state: EditorState) -> NormalizedImage | None:
    """Return the image held by ``state``, if any."""

    return getattr(state, "image", None)
