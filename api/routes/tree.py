"""
api/routes/tree.py — Interactive harmonic tree endpoints.

Endpoints:
    POST   /tree                                — Start a session (root only)
    GET    /tree/{session_id}                   — Positioned visible nodes
    POST   /tree/{session_id}/expand/{node_id}  — Expand a node
    POST   /tree/{session_id}/collapse/{node_id} — Collapse a node and its subtree
    POST   /tree/{session_id}/toggle/{node_id}  — Expand or collapse
    GET    /tree/{session_id}/matches           — Close frequencies among visible nodes
    DELETE /tree/{session_id}                   — Drop the session

Each response that shows the tree re-runs the layout over the current visible
set; positions are never stored.
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_tree_sessions
from api.schemas.tree import (
    NodeMatchOut,
    TreeCreateRequest,
    TreeMatchesResponse,
    TreeNodeOut,
    TreeViewResponse,
)
from core.harmonics.errors import ConfigurationError
from core.harmonics.layout import compute_spacing, layout_nodes
from core.harmonics.proximity import find_close_nodes
from core.harmonics.tree import ROOT_ID, TreeModel
from core.harmonics.types import NodeKind
from infrastructure.metrics import record_tree_action
from infrastructure.session_store import TreeSessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tree", tags=["tree"])


def _view(session_id: str, model: TreeModel) -> TreeViewResponse:
    """Lay out the model's visible nodes and serialise them."""
    visible = model.visible_nodes()
    node_spacing, group_spacing = compute_spacing(
        sum(1 for n in visible if n.kind is NodeKind.FREQUENCY)
    )
    positioned = layout_nodes(visible)
    return TreeViewResponse(
        session_id=session_id,
        node_count=len(positioned),
        node_spacing=node_spacing,
        group_spacing=group_spacing,
        nodes=[
            TreeNodeOut(
                id=n.id,
                name=n.name,
                value=n.value,
                depth=n.depth,
                kind=n.kind.value,
                path=list(n.path),
                parent_id=n.parent_id,
                has_children=n.has_children,
                is_expanded=n.is_expanded,
                x=n.x,
                y=n.y,
            )
            for n in positioned
        ],
    )


def _not_found(exc: KeyError) -> HTTPException:
    detail = exc.args[0] if exc.args else "Not found"
    return HTTPException(status_code=404, detail=str(detail))


# ---------------------------------------------------------------------------
# POST /tree
# ---------------------------------------------------------------------------


@router.post("", response_model=TreeViewResponse, status_code=201)
def create_tree(
    request: TreeCreateRequest,
    sessions: TreeSessionStore = Depends(get_tree_sessions),
) -> TreeViewResponse:
    """Start a new exploration session from the base frequency.

    Raises:
        422: Invalid mode / breadth / custom ratio combination.
    """
    try:
        model = TreeModel(
            base=request.base_frequency,
            breadth=request.breadth,
            mode=request.mode,
            max_depth=request.max_depth,
            custom_ratios=request.ratios_or_default() if request.mode == "custom" else None,
        )
    except ConfigurationError as exc:
        logger.warning("Rejected tree parameters: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    if request.expand_root:
        model.expand(ROOT_ID)

    session_id = sessions.create(model)
    record_tree_action("create")
    logger.info("Created tree session %s (mode=%s, breadth=%d)", session_id, model.mode.value, model.breadth)
    return _view(session_id, model)


# ---------------------------------------------------------------------------
# GET /tree/{session_id}
# ---------------------------------------------------------------------------


@router.get("/{session_id}", response_model=TreeViewResponse)
def get_tree(
    session_id: str,
    sessions: TreeSessionStore = Depends(get_tree_sessions),
) -> TreeViewResponse:
    """Current visible tree with fresh layout coordinates."""
    try:
        with sessions.checkout(session_id) as model:
            return _view(session_id, model)
    except KeyError as exc:
        raise _not_found(exc) from exc


# ---------------------------------------------------------------------------
# POST /tree/{session_id}/{action}/{node_id}
# ---------------------------------------------------------------------------


@router.post("/{session_id}/{action}/{node_id}", response_model=TreeViewResponse)
def node_action(
    session_id: str,
    action: Literal["expand", "collapse", "toggle"],
    node_id: str,
    sessions: TreeSessionStore = Depends(get_tree_sessions),
) -> TreeViewResponse:
    """Expand, collapse or toggle ``node_id`` and return the new layout.

    Raises:
        404: Unknown session or node id.
    """
    try:
        with sessions.checkout(session_id) as model:
            if action == "expand":
                model.expand(node_id)
            elif action == "collapse":
                model.collapse(node_id)
            else:
                model.toggle(node_id)
            view = _view(session_id, model)
    except KeyError as exc:
        raise _not_found(exc) from exc

    record_tree_action(action)
    return view


# ---------------------------------------------------------------------------
# GET /tree/{session_id}/matches
# ---------------------------------------------------------------------------


@router.get("/{session_id}/matches", response_model=TreeMatchesResponse)
def tree_matches(
    session_id: str,
    threshold: float = Query(default=0.01, gt=0.0, lt=1.0),
    sessions: TreeSessionStore = Depends(get_tree_sessions),
) -> TreeMatchesResponse:
    """Near-coincident frequencies among the currently visible nodes."""
    try:
        with sessions.checkout(session_id) as model:
            positioned = layout_nodes(model.visible_nodes())
    except KeyError as exc:
        raise _not_found(exc) from exc

    matches = find_close_nodes(positioned, threshold)
    return TreeMatchesResponse(
        session_id=session_id,
        threshold=threshold,
        matches=[
            NodeMatchOut(
                id_a=m.id_a,
                id_b=m.id_b,
                name_a=m.name_a,
                name_b=m.name_b,
                freq_a=m.freq_a,
                freq_b=m.freq_b,
                x_a=m.x_a,
                y_a=m.y_a,
                x_b=m.x_b,
                y_b=m.y_b,
                relative_difference=m.relative_difference,
                percent_difference=m.relative_difference * 100,
            )
            for m in matches
        ],
    )


# ---------------------------------------------------------------------------
# DELETE /tree/{session_id}
# ---------------------------------------------------------------------------


@router.delete("/{session_id}")
def delete_tree(
    session_id: str,
    sessions: TreeSessionStore = Depends(get_tree_sessions),
) -> dict[str, bool]:
    """Drop a session.

    Raises:
        404: Unknown session id.
    """
    if not sessions.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown tree session {session_id!r}")
    record_tree_action("delete")
    return {"deleted": True}
