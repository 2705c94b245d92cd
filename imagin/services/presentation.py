"""Pure mapping from editor state to what the user interface shows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from imagin.services.states import EditorState, Failure, Loading, Phase, Success, current_image

EDITED_PLACEHOLDER = "Your edited image will appear here."


class EditedPanel(str, Enum):
    HIDDEN = "hidden"
    SPINNER = "spinner"
    IMAGE = "image"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True, slots=True)
class EditorView:
    """Everything a front end needs to draw the editor."""

    upload_label: str
    upload_enabled: bool
    prompt_enabled: bool
    generate_enabled: bool
    error_message: str | None
    original_image: str | None
    edited_panel: EditedPanel
    edited_image: str | None
    loading_phase: Phase | None = None


def render(state: EditorState, instruction: str) -> EditorView:
    """Return the view for ``state`` with ``instruction`` in the prompt box."""

    image = current_image(state)
    loading = isinstance(state, Loading)

    result = None
    if isinstance(state, Success):
        result = state.result
    elif isinstance(state, Failure):
        result = state.result

    if image is None:
        panel = EditedPanel.HIDDEN
    elif result is not None:
        panel = EditedPanel.IMAGE
    elif loading:
        panel = EditedPanel.SPINNER
    else:
        panel = EditedPanel.PLACEHOLDER

    return EditorView(
        upload_label="Change Image" if image is not None else "Upload Image",
        upload_enabled=not loading,
        prompt_enabled=image is not None and not loading,
        generate_enabled=image is not None and bool(instruction) and not loading,
        error_message=state.message if isinstance(state, Failure) else None,
        original_image=image.encoded_payload if image is not None else None,
        edited_panel=panel,
        edited_image=result.data_url if result is not None else None,
        loading_phase=state.phase if loading else None,
    )
