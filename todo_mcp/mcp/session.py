"""
Session management for the Todo MCP server
Binds session identifiers to their dispatcher across transport reconnects
"""
import asyncio
import re
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from ..config import Settings, settings as default_settings
from ..utils.errors import TransportError
from ..utils.logging import get_logger
from .dispatcher import Dispatcher

logger = get_logger("session")

HANDSHAKE_METHOD = "initialize"

# Session ids must be visible ASCII so they survive an HTTP header round trip
_SESSION_ID_PATTERN = re.compile(r"^[\x21-\x7e]{1,128}$")


class SessionState(str, Enum):
    """Session lifecycle states"""
    OPEN = "open"
    ACTIVE = "active"
    CLOSED = "closed"


def new_session_id() -> str:
    return uuid4().hex


def is_valid_session_id(session_id: Optional[str]) -> bool:
    return bool(session_id) and _SESSION_ID_PATTERN.match(session_id) is not None


@dataclass
class Session:
    """A logical client connection and its dedicated dispatcher"""
    id: str
    dispatcher: Dispatcher
    state: SessionState = SessionState.OPEN
    created_at: float = field(default_factory=time.monotonic)
    last_seen: float = field(default_factory=time.monotonic)
    # True while an event stream is relaying this session's outbound queue
    attached: bool = False
    # Outbound messages for the session's stream; None closes the stream
    outbound: "asyncio.Queue[Optional[Dict[str, Any]]]" = field(default_factory=asyncio.Queue)

    def handle(self, payload: Any) -> Optional[Dict[str, Any]]:
        """Dispatch one message within this session."""
        self.touch()
        method = payload.get("method") if isinstance(payload, dict) else None
        if self.state == SessionState.OPEN and method != HANDSHAKE_METHOD:
            self.state = SessionState.ACTIVE
        return self.dispatcher.handle(payload)

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def send(self, message: Dict[str, Any]) -> None:
        """Queue a message for the session's outbound stream."""
        if self.state != SessionState.CLOSED:
            self.outbound.put_nowait(message)

    @property
    def is_closed(self) -> bool:
        return self.state == SessionState.CLOSED


class SessionManager:
    """
    Tracks live sessions by identifier.

    At most one dispatcher is registered per identifier. Lookups that miss
    outside the handshake are recovered by creating a new session instead of
    failing the call.
    """

    def __init__(
        self,
        dispatcher_factory: Callable[[], Dispatcher],
        settings: Optional[Settings] = None,
    ):
        self.dispatcher_factory = dispatcher_factory
        self.settings = settings or default_settings
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.RLock()

    def create(self, session_id: Optional[str] = None) -> Session:
        """
        Register a new session with its own dispatcher.

        Args:
            session_id: Identifier to bind; a fresh one is minted if omitted

        Raises:
            ValueError: If the identifier is already registered
        """
        with self._lock:
            if session_id is None:
                session_id = new_session_id()
                while session_id in self._sessions:
                    session_id = new_session_id()
            elif session_id in self._sessions:
                raise ValueError(f"Session {session_id} already exists")

            session = Session(id=session_id, dispatcher=self.dispatcher_factory())
            self._sessions[session_id] = session
            logger.info("Session created: %s (%d live)", session_id, len(self._sessions))
            return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def resolve(self, session_id: Optional[str], method: Optional[str] = None) -> Tuple[Session, bool]:
        """
        Find the session a call belongs to, creating one when needed.

        A handshake without an identifier starts a new session. A known
        identifier reuses its session. An unknown identifier starts a new
        session bound to that identifier when it is usable, otherwise to a
        freshly minted one.

        Returns:
            The session and whether it was created by this call
        """
        with self._lock:
            self.purge_idle()

            session = self.get(session_id)
            if session is not None:
                return session, False

            if session_id is None and method == HANDSHAKE_METHOD:
                return self.create(), True

            error = TransportError(session_id, method)
            logger.warning("%s; starting a new session", error)
            if is_valid_session_id(session_id):
                return self.create(session_id), True
            return self.create(), True

    def close(self, session_id: Optional[str]) -> bool:
        """
        End a session and purge it from the live set.

        Returns:
            True if the session existed
        """
        with self._lock:
            session = self._sessions.pop(session_id, None) if session_id else None
        if session is None:
            return False

        session.state = SessionState.CLOSED
        session.outbound.put_nowait(None)
        logger.info("Session closed: %s (%d live)", session_id, len(self))
        return True

    def purge_idle(self) -> List[str]:
        """
        Close sessions idle for longer than the configured timeout.

        Sessions with an attached stream are never idle; only a stream
        disconnect or explicit termination ends them.
        """
        timeout = self.settings.session_idle_timeout
        if timeout <= 0:
            return []

        cutoff = time.monotonic() - timeout
        with self._lock:
            stale = [
                sid for sid, s in self._sessions.items()
                if not s.attached and s.last_seen < cutoff
            ]
        for session_id in stale:
            logger.info("Purging idle session %s", session_id)
            self.close(session_id)
        return stale

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
