"""In-memory store owning the lifecycle of every live session.

The store keeps one short-held lock for the code -> session map and one
re-entrant lock per session. Everything that reads a session, changes it and
then broadcasts runs inside ``locked(code)`` so those steps are atomic for that
session, while unrelated sessions proceed independently.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from showrelay.server.models.session import Session

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Base error for session lookups and creation."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class SessionExistsError(SessionError):
    """Raised when a session code is already in use."""


class SessionNotFoundError(SessionError):
    """Raised when no live session has the given code."""


class SessionStore:
    """Thread-safe registry of sessions keyed by code."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._map_lock = threading.Lock()

    def create_session(self, code: str, host_sid: str) -> Session:
        """Register a new session hosted by ``host_sid``.

        Raises:
            SessionExistsError: if ``code`` already belongs to a live session.
        """
        with self.created(code, host_sid) as session:
            return session

    @contextmanager
    def created(self, code: str, host_sid: str) -> Iterator[Session]:
        """Register a new session and hold its lock for the duration of the block.

        The lock is taken before the session becomes visible, so no other
        operation on ``code`` can run until the creator has finished setting
        it up.

        Raises:
            SessionExistsError: if ``code`` already belongs to a live session.
        """
        lock = threading.RLock()
        with lock:
            with self._map_lock:
                if code in self._sessions:
                    raise SessionExistsError(code)
                session = Session(code=code, host_sid=host_sid)
                self._sessions[code] = session
                self._locks[code] = lock
            logger.info(
                "session_created code=%s host=%s created_at=%s",
                code, host_sid, session.created_at.isoformat(),
            )
            yield session

    def lookup_session(self, code: str) -> Session:
        """Return the live session for ``code`` without locking it.

        Raises:
            SessionNotFoundError: if no session has that code.
        """
        with self._map_lock:
            session = self._sessions.get(code)
        if session is None:
            raise SessionNotFoundError(code)
        return session

    @contextmanager
    def locked(self, code: str) -> Iterator[Session]:
        """Hold the session's lock for the duration of the block.

        The session is re-checked after the lock is acquired, so a session
        deleted (or deleted and re-created) while waiting is reported as
        missing rather than handed out.
        """
        with self._map_lock:
            lock = self._locks.get(code)
        if lock is None:
            raise SessionNotFoundError(code)

        with lock:
            with self._map_lock:
                session = self._sessions.get(code)
                current_lock = self._locks.get(code)
            if session is None or current_lock is not lock:
                raise SessionNotFoundError(code)
            yield session

    def delete_session(self, code: str) -> Optional[Session]:
        """Remove the session if present. Safe to call repeatedly."""
        with self._map_lock:
            session = self._sessions.pop(code, None)
            self._locks.pop(code, None)
        if session is not None:
            logger.info("session_deleted code=%s", code)
        return session

    def session_count(self) -> int:
        with self._map_lock:
            return len(self._sessions)

    def player_count(self) -> int:
        with self._map_lock:
            return sum(len(session.players) for session in self._sessions.values())

    def __contains__(self, code: object) -> bool:
        with self._map_lock:
            return code in self._sessions
