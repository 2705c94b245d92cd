"""Editor state machine, orchestration and view rendering."""

from .orchestrator import EditOrchestrator, EmptyResponseError, OrchestratorBusyError, extract_edit_result
from .presentation import EditedPanel, EditorView, render
from .states import EditorState, ErrorKind, Failure, Idle, Loading, Phase, Ready, Success

__all__ = [
    "EditOrchestrator",
    "EditedPanel",
    "EditorState",
    "EditorView",
    "EmptyResponseError",
    "ErrorKind",
    "Failure",
    "Idle",
    "Loading",
    "OrchestratorBusyError",
    "Phase",
    "Ready",
    "Success",
    "extract_edit_result",
    "render",
]
