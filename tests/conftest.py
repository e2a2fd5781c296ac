"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat structure-building or dependency-override boilerplate.
"""

import pytest
from fastapi.testclient import TestClient

from api.deps import get_tree_sessions
from api.main import app
from core.harmonics.paths import flatten_structure
from core.harmonics.structure import build_structure
from core.harmonics.tree import TreeModel
from core.harmonics.types import FrequencyRecord
from infrastructure.session_store import TreeSessionStore

# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def harmonic_records() -> tuple[FrequencyRecord, ...]:
    """440 Hz, harmonic mode, breadth 3, depth 2 — 40 records."""
    return flatten_structure(build_structure(440.0, 2, 3, "harmonic"))


@pytest.fixture()
def tree() -> TreeModel:
    """Unexpanded 440 Hz harmonic tree, breadth 3, depth 2."""
    return TreeModel(base=440.0, breadth=3, mode="harmonic", max_depth=2)


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def api_client():
    """FastAPI ``TestClient`` with a fresh, isolated tree session store.

    The store is accessible as ``client.sessions``.
    """
    store = TreeSessionStore(max_sessions=8, ttl_seconds=600.0)
    app.dependency_overrides[get_tree_sessions] = lambda: store
    client = TestClient(app)
    client.sessions = store  # type: ignore[attr-defined]
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_tree_sessions, None)
