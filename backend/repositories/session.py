"""Session repository.

Chat sessions live in process memory; a restart discards them along with
their charts.
"""
from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Dict, List, Optional

from models.session import PlotSession


class SessionRepository:
    """In-memory store of chat sessions.

    Attributes:
        _sessions: Sessions keyed by session ID.
    """

    def __init__(self):
        self._sessions: Dict[str, PlotSession] = {}

    def create(self, system_prompt: str) -> PlotSession:
        """Start a session whose conversation begins with ``system_prompt``.

        Args:
            system_prompt: System message sent with every request.

        Returns:
            The new session.
        """
        session = PlotSession(session_id=uuid.uuid4().hex)
        session.add_message({"role": "system", "content": system_prompt})
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> PlotSession:
        """Get a session by ID.

        Raises:
            ValueError: If the session does not exist.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise ValueError(f"Session {session_id} not found")
        return session

    def get_or_none(self, session_id: str) -> Optional[PlotSession]:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        """Delete a session.

        Returns:
            True if deleted, False if not found.
        """
        return self._sessions.pop(session_id, None) is not None

    def list_ids(self) -> List[str]:
        return list(self._sessions)


@lru_cache(maxsize=1)
def get_session_repository() -> SessionRepository:
    """Get the singleton session repository."""
    return SessionRepository()
