"""Tests for the state-to-view mapping."""

from __future__ import annotations

from imagin.imgproc.payload import EditResult, NormalizedImage
from imagin.services.presentation import EDITED_PLACEHOLDER, EditedPanel, render
from imagin.services.states import ErrorKind, Failure, Idle, Loading, Phase, Ready, Success

IMAGE = NormalizedImage("data:image/jpeg;base64,AAAA", "image/jpeg", 10, 10)
RESULT = EditResult("XYZ", "image/png")


def test_idle_view() -> None:
    view = render(Idle(), "")

    assert view.upload_label == "Upload Image"
    assert view.upload_enabled
    assert not view.prompt_enabled
    assert not view.generate_enabled
    assert view.edited_panel is EditedPanel.HIDDEN
    assert view.original_image is None
    assert view.error_message is None


def test_ready_view_needs_instruction_to_generate() -> None:
    assert not render(Ready(IMAGE), "").generate_enabled

    view = render(Ready(IMAGE), "add a dog")

    assert view.upload_label == "Change Image"
    assert view.prompt_enabled
    assert view.generate_enabled
    assert view.original_image == IMAGE.encoded_payload
    assert view.edited_panel is EditedPanel.PLACEHOLDER
    assert EDITED_PLACEHOLDER == "Your edited image will appear here."


def test_loading_disables_controls_and_shows_spinner() -> None:
    view = render(Loading(Phase.EDIT, IMAGE), "add a dog")

    assert not view.upload_enabled
    assert not view.prompt_enabled
    assert not view.generate_enabled
    assert view.edited_panel is EditedPanel.SPINNER
    assert view.loading_phase is Phase.EDIT


def test_success_view_shows_edited_data_url() -> None:
    view = render(Success(IMAGE, RESULT), "add a dog")

    assert view.edited_panel is EditedPanel.IMAGE
    assert view.edited_image == "data:image/png;base64,XYZ"
    assert view.error_message is None


def test_failure_view_shows_user_message_only() -> None:
    view = render(Failure(ErrorKind.SERVICE, IMAGE), "add a dog")

    assert view.error_message == "Failed to edit image. Please check the prompt or try again."
    assert view.edited_panel is EditedPanel.PLACEHOLDER
    assert view.generate_enabled


def test_image_processing_failure_hides_panels() -> None:
    view = render(Failure(ErrorKind.IMAGE_PROCESSING), "")

    assert view.original_image is None
    assert view.edited_panel is EditedPanel.HIDDEN
    assert view.upload_label == "Upload Image"
