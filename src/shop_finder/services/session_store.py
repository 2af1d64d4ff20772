"""Session store for in-flight chat dialogs."""

from dataclasses import dataclass
from typing import Protocol

from shop_finder.domain.dialogs import DialogSession


class SessionStore(Protocol):
    """Keyed storage for dialog sessions."""

    def get(self, session_id: int) -> DialogSession | None:
        """Return the current session for a chat, if any."""

    def put(self, session_id: int, session: DialogSession) -> None:
        """Store or replace the session for a chat."""

    def delete(self, session_id: int) -> None:
        """Remove the session for a chat, if present."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store; state is lost on restart."""

    _sessions: dict[int, DialogSession]

    def __init__(self) -> None:
        self._sessions = {}

    def get(self, session_id: int) -> DialogSession | None:
        return self._sessions.get(session_id)

    def put(self, session_id: int, session: DialogSession) -> None:
        self._sessions[session_id] = session

    def delete(self, session_id: int) -> None:
        self._sessions.pop(session_id, None)
