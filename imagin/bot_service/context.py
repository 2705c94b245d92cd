"""Shared dependencies passed into handler setup functions."""

from __future__ import annotations

from dataclasses import dataclass

from imagin.services.orchestrator import EditOrchestrator
from imagin.services.sessions import SessionRegistry


@dataclass(slots=True)
class BotContext:
    """Container for objects shared across handlers."""

    sessions: SessionRegistry

    def orchestrator_for(self, chat_id: int) -> EditOrchestrator:
        """Return the chat's orchestrator, creating it on first contact."""

        return self.sessions.get_or_create(str(chat_id))
