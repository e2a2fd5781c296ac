"""
api/schemas/tree.py — Pydantic schemas for the interactive tree endpoints.

Covers:
    POST   /tree                          — TreeCreateRequest → TreeViewResponse
    GET    /tree/{session_id}             — TreeViewResponse
    POST   /tree/{session_id}/{action}/{node_id} — TreeViewResponse
    GET    /tree/{session_id}/matches     — TreeMatchesResponse
"""

from pydantic import BaseModel, Field

from api.schemas.harmonics import StructureParams


class TreeCreateRequest(StructureParams):
    """Request body for POST /tree. Starts with only the root visible."""

    expand_root: bool = Field(default=False, description="Expand the root right away.")


class TreeNodeOut(BaseModel):
    """A positioned visible node."""

    id: str
    name: str
    value: float | None
    depth: int = Field(..., ge=-1)
    kind: str
    path: list[int]
    parent_id: str | None
    has_children: bool
    is_expanded: bool
    x: float
    y: float


class TreeViewResponse(BaseModel):
    """The current visible, laid-out tree of a session."""

    session_id: str
    node_count: int
    node_spacing: float
    group_spacing: float
    nodes: list[TreeNodeOut]


class NodeMatchOut(BaseModel):
    """Two visible nodes whose frequencies nearly coincide."""

    id_a: str
    id_b: str
    name_a: str
    name_b: str
    freq_a: float
    freq_b: float
    x_a: float
    y_a: float
    x_b: float
    y_b: float
    relative_difference: float
    percent_difference: float


class TreeMatchesResponse(BaseModel):
    """Response body for GET /tree/{session_id}/matches."""

    session_id: str
    threshold: float
    matches: list[NodeMatchOut]
