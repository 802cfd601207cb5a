"""In-memory, thread-safe store of chat sessions keyed by UUID.

The orchestrator never works on a private copy of a session. Every message is
appended through :meth:`SessionStore.append_message`, which mutates the live
entry under the store lock, so concurrent requests on the same session id can
interleave but never overwrite each other's messages.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone

from .models import Message, Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Concurrent mapping of session id to :class:`Session`."""

    def __init__(self) -> None:
        self._sessions: dict[uuid.UUID, Session] = {}
        self._lock = threading.Lock()

    def create(self) -> Session:
        """Provision a new session with a fresh id."""
        session_id = uuid.uuid4()
        with self._lock:
            session = Session(id=session_id)
            self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return session.model_copy(deep=True)

    def get_or_create(self, session_id: uuid.UUID) -> Session:
        """Return a snapshot of the session, creating an empty one if missing."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(id=session_id)
                self._sessions[session_id] = session
                logger.debug("Created session %s on first use", session_id)
            return session.model_copy(deep=True)

    def get(self, session_id: uuid.UUID) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session is not None else None

    def update(self, session: Session) -> None:
        """Unconditionally overwrite the entry for ``session.id``."""
        with self._lock:
            self._sessions[session.id] = session.model_copy(deep=True)

    def append_message(self, session_id: uuid.UUID, message: Message) -> int:
        """Atomically append to the live session. Returns the new message count."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(id=session_id)
                self._sessions[session_id] = session
            session.add_message(message)
            return len(session.messages)

    def snapshot(self, session_id: uuid.UUID) -> list[Message]:
        """Copy of the current message history (empty if the session is unknown)."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return []
            return [m.model_copy() for m in session.messages]

    def clear(self, session_id: uuid.UUID) -> None:
        """Empty the session's history in place. Unknown ids are ignored."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def prune_idle(self, max_idle: timedelta) -> int:
        """Drop sessions whose last activity is older than ``max_idle``."""
        cutoff = datetime.now(timezone.utc) - max_idle
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if s.last_activity < cutoff]
            for sid in stale:
                del self._sessions[sid]
        if stale:
            logger.info("Pruned %d idle sessions", len(stale))
        return len(stale)
