# lifetrack/app/security/sessions.py
"""
Server-side session table.

Sessions live in process memory and are lost on restart. A session is
created on login, looked up on every authenticated request and removed
on logout or the first lookup after it has expired. It is never renewed
in place.

The optional sweeper only bounds memory; expired sessions are already
rejected by lookup.
"""
import abc
import asyncio
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from starlette.responses import Response

from lifetrack.app.core.errors import SessionExpired, SessionNotFound

logger = logging.getLogger(__name__)

# 32 random bytes, URL-safe base64
TOKEN_BYTES = 32

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    token: str
    user_id: int
    display_name: str
    expires_at: datetime
    is_admin: bool = False


class SessionStore(abc.ABC):
    """Storage backend for sessions, keyed by token."""

    @abc.abstractmethod
    def create(self, user_id: int, display_name: str, is_admin: bool = False) -> Session:
        ...

    @abc.abstractmethod
    def get(self, token: str) -> Session:
        """Return a live session or raise SessionNotFound / SessionExpired."""

    @abc.abstractmethod
    def delete(self, token: str) -> None:
        ...

    @abc.abstractmethod
    def delete_for_user(self, user_id: int) -> int:
        ...

    @abc.abstractmethod
    def sweep(self) -> int:
        """Drop every expired session, returning how many were removed."""


class InMemorySessionStore(SessionStore):
    """Dict-backed store, safe to share between threads."""

    def __init__(self, ttl: timedelta = timedelta(hours=24), clock: Clock = utc_now):
        self.ttl = ttl
        self._clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, user_id: int, display_name: str, is_admin: bool = False) -> Session:
        session = Session(
            token=secrets.token_urlsafe(TOKEN_BYTES),
            user_id=user_id,
            display_name=display_name,
            expires_at=self._clock() + self.ttl,
            is_admin=is_admin,
        )
        with self._lock:
            self._sessions[session.token] = session
        return session

    def get(self, token: str) -> Session:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                raise SessionNotFound("session not found")
            if self._clock() > session.expires_at:
                del self._sessions[token]
                raise SessionExpired("session expired")
            return session

    def delete(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def delete_for_user(self, user_id: int) -> int:
        with self._lock:
            tokens = [t for t, s in self._sessions.items() if s.user_id == user_id]
            for token in tokens:
                del self._sessions[token]
        return len(tokens)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if now > s.expires_at]
            for token in expired:
                del self._sessions[token]
        return len(expired)


class SessionManager:
    """
    Binds a SessionStore to the session cookie.

    Usage:
        manager = SessionManager(InMemorySessionStore(), "lifetrack_session")
        manager.create_session(response, user.id, user.username)
        session = manager.validate_session(request.cookies.get(manager.cookie_name))
    """

    def __init__(self, store: SessionStore, cookie_name: str, secure: bool = False):
        self.store = store
        self.cookie_name = cookie_name
        self.secure = secure

    def create_session(self, response: Response, user_id: int, display_name: str,
                       is_admin: bool = False) -> Session:
        session = self.store.create(user_id, display_name, is_admin=is_admin)
        response.set_cookie(
            key=self.cookie_name,
            value=session.token,
            expires=session.expires_at,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )
        return session

    def validate_session(self, token: Optional[str]) -> Session:
        if not token:
            raise SessionNotFound("no session cookie")
        return self.store.get(token)

    def clear_session(self, response: Response, token: Optional[str]) -> None:
        if token:
            self.store.delete(token)
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def cleanup_expired_sessions(self) -> int:
        removed = self.store.sweep()
        if removed:
            logger.info("Removed %d expired sessions", removed)
        return removed


async def run_session_sweeper(manager: SessionManager, interval_seconds: float) -> None:
    """Sweep expired sessions every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        manager.cleanup_expired_sessions()
