"""Edit request orchestration: upload, validate, call the service, keep state."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from imagin.imggen.edit_client import EditService
from imagin.imgproc.normalize import ImageNormalizer, ImageProcessingError
from imagin.imgproc.payload import EditResult, RawImageFile
from imagin.metrics.prometheus_exporter import image_edits_total, image_uploads_total
from imagin.services.states import (
    EditorState,
    ErrorKind,
    Failure,
    Idle,
    Loading,
    Phase,
    Ready,
    Success,
    current_image,
)

logger = logging.getLogger(__name__)


class EmptyResponseError(RuntimeError):
    """Raised when the edit service response carries no usable image part."""


class OrchestratorBusyError(RuntimeError):
    """Raised when an edit is requested while another request is in flight."""


def extract_edit_result(response: Any) -> EditResult:
    """Return the inline image of the first part of the first candidate."""

    if not isinstance(response, Mapping):
        raise EmptyResponseError("Edit service response is not an object.")
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise EmptyResponseError("Edit service returned no candidates.")
    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, Mapping) else None
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list) or not parts:
        raise EmptyResponseError("First candidate has no content parts.")
    part = parts[0]
    inline_data = None
    if isinstance(part, Mapping):
        inline_data = part.get("inlineData") or part.get("inline_data")
    if not isinstance(inline_data, Mapping):
        raise EmptyResponseError("First content part carries no inline image data.")
    data = inline_data.get("data")
    content_type = inline_data.get("mimeType") or inline_data.get("mime_type")
    if not data or not content_type:
        raise EmptyResponseError("Inline image part is missing data or content type.")
    return EditResult(encoded_payload=str(data), content_type=str(content_type))


class EditOrchestrator:
    """Owns the editor state and runs one upload or edit per user action.

    Every trigger bumps an action sequence number. A completion whose number is
    no longer current belongs to an overtaken action and is discarded, so only
    the most recent action updates the visible state.
    """

    def __init__(self, normalizer: ImageNormalizer, service: EditService) -> None:
        self._normalizer = normalizer
        self._service = service
        self._state: EditorState = Idle()
        self._instruction = ""
        self._sequence = 0

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def instruction(self) -> str:
        return self._instruction

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, Loading)

    def set_instruction(self, text: str) -> None:
        self._instruction = text

    def reset(self) -> None:
        """Discard the image and any result and go back to Idle."""

        self._sequence += 1
        self._state = Idle()

    async def upload(self, raw: RawImageFile) -> EditorState | None:
        """Normalize ``raw`` and hold it ready for editing.

        Returns the new state, or ``None`` when a newer action overtook this one
        and its outcome was discarded.
        """

        self._sequence += 1
        sequence = self._sequence
        previous = _settled(self._state)
        self._state = Loading(Phase.NORMALIZE, current_image(previous))

        try:
            image = await self._normalizer.normalize(raw)
        except ImageProcessingError as exc:
            logger.error("Could not process uploaded image: %s", exc)
            image_uploads_total.labels(outcome="error").inc()
            return self._apply(sequence, Failure(ErrorKind.IMAGE_PROCESSING))
        except asyncio.CancelledError:
            logger.warning("Image upload was cancelled")
            self._apply(sequence, previous)
            raise

        image_uploads_total.labels(outcome="success").inc()
        return self._apply(sequence, Ready(image))

    async def request_edit(self, instruction: str | None = None) -> EditorState | None:
        """Send the loaded image and the instruction to the edit service.

        Missing image or empty instruction ends in a validation failure without
        any request. Raises ``OrchestratorBusyError`` while a request is in flight.
        Returns ``None`` when the outcome was discarded as stale.
        """

        if instruction is not None:
            self._instruction = instruction
        if self.is_loading:
            raise OrchestratorBusyError("A request is already in progress.")

        image = current_image(self._state)
        if image is None or not self._instruction:
            previous = self._state
            result = previous.result if isinstance(previous, (Success, Failure)) else None
            self._state = Failure(ErrorKind.VALIDATION, image, result)
            return self._state

        self._sequence += 1
        sequence = self._sequence
        self._state = Loading(Phase.EDIT, image)

        try:
            response = await self._service.edit_image(image.base64_data, image.content_type, self._instruction)
            result = extract_edit_result(response)
        except EmptyResponseError as exc:
            logger.error("Edit service returned no image: %s", exc)
            image_edits_total.labels(outcome="empty").inc()
            return self._apply(sequence, Failure(ErrorKind.EMPTY_RESPONSE, image))
        except asyncio.CancelledError:
            logger.warning("Edit request was cancelled")
            image_edits_total.labels(outcome="cancelled").inc()
            self._apply(sequence, Failure(ErrorKind.SERVICE, image))
            raise
        except Exception as exc:
            logger.exception("Edit request failed: %s", exc)
            image_edits_total.labels(outcome="error").inc()
            return self._apply(sequence, Failure(ErrorKind.SERVICE, image))

        image_edits_total.labels(outcome="success").inc()
        return self._apply(sequence, Success(image, result))

    def _apply(self, sequence: int, state: EditorState) -> EditorState | None:
        if sequence != self._sequence:
            logger.debug("Discarding stale result of action %d (current %d)", sequence, self._sequence)
            return None
        self._state = state
        return state


def _settled(state: EditorState) -> EditorState:
    """Return ``state`` with an in-flight Loading replaced by its resting form."""

    if not isinstance(state, Loading):
        return state
    return Idle() if state.image is None else Ready(state.image)
