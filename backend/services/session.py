"""Session management service with in-memory storage of laid-out workflows."""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """The most recent workflow and diagram computed for one editor."""

    id: str
    created_at: float
    updated_at: float
    model: dict[str, Any] | None = None
    diagram: dict[str, Any] | None = None


class SessionManager:
    """Manages in-memory workflow sessions.

    All instances share the same session store so that routers
    can each instantiate SessionManager() independently.
    """

    _sessions: dict[str, Session] = {}

    def create_session(self) -> str:
        """Create a new session and return its ID."""
        self._cleanup_expired()
        if len(self._sessions) >= settings.max_sessions:
            self._evict_oldest()
        session_id = uuid.uuid4().hex
        now = time.time()
        self._sessions[session_id] = Session(
            id=session_id,
            created_at=now,
            updated_at=now,
        )
        logger.debug("Created session %s", session_id)
        return session_id

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID, returning None if not found or expired."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._is_expired(session):
            del self._sessions[session_id]
            return None
        session.updated_at = time.time()
        return session

    def delete_session(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed."""
        return self._sessions.pop(session_id, None) is not None

    def store_result(
        self,
        session_id: str | None,
        model: dict[str, Any],
        diagram: dict[str, Any],
    ) -> str:
        """Save a workflow and its diagram, reusing ``session_id`` when still live.

        Returns the ID of the session that now holds the result.
        """
        session = self.get_session(session_id) if session_id else None
        if session is None:
            session = self._sessions[self.create_session()]
        session.model = model
        session.diagram = diagram
        session.updated_at = time.time()
        return session.id

    def _is_expired(self, session: Session) -> bool:
        return (time.time() - session.updated_at) > settings.session_ttl_seconds

    def _cleanup_expired(self) -> None:
        expired = [
            sid for sid, s in self._sessions.items() if self._is_expired(s)
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Dropped %d expired sessions", len(expired))

    def _evict_oldest(self) -> None:
        if not self._sessions:
            return
        oldest_id = min(self._sessions, key=lambda k: self._sessions[k].updated_at)
        del self._sessions[oldest_id]
        logger.info("Session limit reached, evicted %s", oldest_id)
