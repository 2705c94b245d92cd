"""In-memory registry of editor sessions shared by the API and the bot."""

from __future__ import annotations

import uuid

from imagin.imggen.edit_client import EditService
from imagin.imgproc.normalize import ImageNormalizer
from imagin.metrics.prometheus_exporter import active_sessions
from imagin.services.orchestrator import EditOrchestrator


class SessionRegistry:
    """Creates one orchestrator per session key and keeps it in memory."""

    def __init__(self, normalizer: ImageNormalizer, service: EditService) -> None:
        self._normalizer = normalizer
        self._service = service
        self._sessions: dict[str, EditOrchestrator] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, key: str | None = None) -> tuple[str, EditOrchestrator]:
        """Register a fresh orchestrator and return it with its key."""

        session_id = key or uuid.uuid4().hex
        orchestrator = EditOrchestrator(self._normalizer, self._service)
        self._sessions[session_id] = orchestrator
        active_sessions.set(len(self._sessions))
        return session_id, orchestrator

    def get(self, key: str) -> EditOrchestrator | None:
        return self._sessions.get(key)

    def get_or_create(self, key: str) -> EditOrchestrator:
        orchestrator = self._sessions.get(key)
        if orchestrator is None:
            _, orchestrator = self.create(key)
        return orchestrator

    def drop(self, key: str) -> bool:
        """Forget ``key``; returns ``False`` when it was unknown."""

        removed = self._sessions.pop(key, None) is not None
        active_sessions.set(len(self._sessions))
        return removed
