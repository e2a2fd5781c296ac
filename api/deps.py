"""
FastAPI dependency providers.

Provides the process-wide tree session store as a lazily created singleton so
every request sees the same in-memory sessions. Limits come from the
environment (``.env`` is honoured):

    HARMONIC_TREE_SESSIONS_MAX   maximum live sessions (default 256)
    HARMONIC_TREE_SESSION_TTL    idle seconds before a session expires (default 3600)
"""

import logging
import os

from dotenv import load_dotenv

from infrastructure.session_store import TreeSessionStore

logger = logging.getLogger(__name__)

_tree_sessions: TreeSessionStore | None = None


def get_tree_sessions() -> TreeSessionStore:
    """
    Return a cached ``TreeSessionStore`` singleton.

    The store is created on first call and reused thereafter.
    """
    global _tree_sessions  # noqa: PLW0603
    if _tree_sessions is None:
        load_dotenv()
        max_sessions = int(os.environ.get("HARMONIC_TREE_SESSIONS_MAX", "256"))
        ttl_seconds = float(os.environ.get("HARMONIC_TREE_SESSION_TTL", "3600"))
        _tree_sessions = TreeSessionStore(max_sessions=max_sessions, ttl_seconds=ttl_seconds)
        logger.info(
            "Tree session store ready (max=%d, ttl=%.0fs)", max_sessions, ttl_seconds
        )
    return _tree_sessions


def reset_tree_sessions() -> None:
    """Drop the singleton so the next call re-reads the environment."""
    global _tree_sessions  # noqa: PLW0603
    _tree_sessions = None
