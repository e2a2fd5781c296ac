"""
In-memory tree session store with TTL and LRU eviction.

Each interactive exploration owns one TreeModel. The store hands out opaque
session ids, keeps the most recently used sessions, and serialises access to
each model with a per-session lock so concurrent requests for the same
session never interleave expand/collapse calls. Every change in size is
published to the harmonic_tree_sessions_active gauge. Nothing is persisted.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock

from core.harmonics.tree import TreeModel
from infrastructure.metrics import set_tree_sessions

logger = logging.getLogger(__name__)

_DEFAULT_MAX_SESSIONS = 256
_DEFAULT_TTL_SECONDS = 3600.0


@dataclass
class TreeSession:
    """A stored TreeModel with its bookkeeping."""

    model: TreeModel
    last_used: float  # Unix timestamp of the last access
    lock: Lock = field(default_factory=Lock)


class TreeSessionStore:
    """
    Thread-safe TreeModel store with TTL and LRU eviction.

    Args:
        max_sessions: Maximum number of live sessions (default: 256)
        ttl_seconds: Idle time after which a session expires (default: 3600)
    """

    def __init__(
        self,
        max_sessions: int = _DEFAULT_MAX_SESSIONS,
        ttl_seconds: float = _DEFAULT_TTL_SECONDS,
    ) -> None:
        """Initialize store with size and TTL limits."""
        if max_sessions <= 0:
            raise ValueError(f"max_sessions must be positive, got {max_sessions}")
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._sessions: OrderedDict[str, TreeSession] = OrderedDict()
        self._lock = Lock()

    def create(self, model: TreeModel) -> str:
        """
        Store ``model`` under a fresh session id.

        Evicts the least-recently-used session if the store is full.

        Returns:
            The new session id.
        """
        session_id = uuid.uuid4().hex
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted least-recently-used tree session %s", evicted)
            self._sessions[session_id] = TreeSession(model=model, last_used=time.time())
            set_tree_sessions(len(self._sessions))
        return session_id

    def _lookup(self, session_id: str) -> TreeSession | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            age = time.time() - session.last_used
            if age > self.ttl_seconds:
                del self._sessions[session_id]
                logger.info("Tree session %s expired after %.0fs idle", session_id, age)
                set_tree_sessions(len(self._sessions))
                return None

            session.last_used = time.time()
            self._sessions.move_to_end(session_id)
            return session

    def get(self, session_id: str) -> TreeModel | None:
        """
        Return the model for ``session_id`` if present and not expired.

        Prefer ``checkout`` when mutating the model.
        """
        session = self._lookup(session_id)
        return session.model if session is not None else None

    @contextmanager
    def checkout(self, session_id: str) -> Iterator[TreeModel]:
        """
        Hold the session's lock while the caller works on its model.

        Raises:
            KeyError: Unknown or expired session id.
        """
        session = self._lookup(session_id)
        if session is None:
            raise KeyError(f"Unknown tree session {session_id!r}")
        with session.lock:
            yield session.model

    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns True if it existed."""
        with self._lock:
            existed = self._sessions.pop(session_id, None) is not None
            set_tree_sessions(len(self._sessions))
            return existed

    def clear(self) -> None:
        """Drop all sessions."""
        with self._lock:
            self._sessions.clear()
            set_tree_sessions(0)

    def size(self) -> int:
        """Return current number of stored sessions."""
        with self._lock:
            return len(self._sessions)
