"""Request and response models of the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel

from imagin.services.presentation import EditorView


class EditRequest(BaseModel):
    instruction: str = ""


class SessionCreated(BaseModel):
    session_id: str


class EditorViewResponse(BaseModel):
    """Serialised ``EditorView`` plus the current instruction."""

    session_id: str
    state: str
    instruction: str
    upload_label: str
    upload_enabled: bool
    prompt_enabled: bool
    generate_enabled: bool
    error_message: str | None = None
    original_image: str | None = None
    edited_panel: str
    edited_image: str | None = None
    loading_phase: str | None = None

    @classmethod
    def from_view(cls, session_id: str, state_name: str, instruction: str, view: EditorView) -> "EditorViewResponse":
        return cls(
            session_id=session_id,
            state=state_name,
            instruction=instruction,
            upload_label=view.upload_label,
            upload_enabled=view.upload_enabled,
            prompt_enabled=view.prompt_enabled,
            generate_enabled=view.generate_enabled,
            error_message=view.error_message,
            original_image=view.original_image,
            edited_panel=view.edited_panel.value,
            edited_image=view.edited_image,
            loading_phase=view.loading_phase.value if view.loading_phase else None,
        )
