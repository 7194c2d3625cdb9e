"""Registry of active sessions, keyed by username."""
from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from .context import AuthenticatedUser, UserContext


@dataclass(frozen=True)
class Session:
    authenticated_user: AuthenticatedUser
    user_context: UserContext


class SessionRegistry:
    """Thread-safe mapping of username to Session."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}

    def add(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.authenticated_user.identifier] = session

    def get(self, username: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(username)

    def remove(self, username: str) -> None:
        with self._lock:
            self._sessions.pop(username, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
