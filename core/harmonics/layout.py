"""
core/harmonics/layout.py — Deterministic, overlap-free tree layout.

Assigns (x, y) to the visible nodes of a TreeModel:

    1. The root is pinned at (anchor_x, anchor_y).
    2. Nodes are grouped by depth, then by parent id, keeping traversal order.
    3. A sibling group sits one column (column_width) right of its parent.
    4. Vertical spacing adapts to density. With n visible frequency nodes,

           factor        = clamp((saturation - n) / saturation, 0, 1)
           node_spacing  = min_node  + (max_node  - min_node)  * factor
           group_spacing = min_group + (max_group - min_group) * factor

       so crowded trees pack tighter and sparse trees breathe.
    5. Per depth, a running cursor tracks the lowest y used so far. The first
       group may lift up to ``first_group_lift`` above its parent (clamped at
       ``top_limit``); every later group starts at
       max(cursor, parent.y - later_group_lift), i.e. never above the previous
       group's envelope plus group_spacing.

Property: within one depth the [min_y, max_y] envelopes of sibling groups are
disjoint and increase monotonically in traversal order, and siblings inside a
group are node_spacing apart. Identical input gives bit-identical output.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from core.harmonics.types import NodeKind, VisibleNode

# ---------------------------------------------------------------------------
# LayoutConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing constants for layout_nodes().

    Attributes:
        anchor_x / anchor_y:   Root position
        column_width:          Horizontal distance between depth columns
        min_node_spacing /
        max_node_spacing:      Bounds for the gap between siblings
        min_group_spacing /
        max_group_spacing:     Bounds for the gap between sibling groups
        density_saturation:    Visible frequency-node count at which spacing
                               reaches its minimum
        first_group_lift:      How far above its parent the first group of a
                               depth may start
        later_group_lift:      How far above its parent any later group may start
        top_limit:             Lowest y the first group may start at
        cursor_start:          Initial per-depth cursor
    """

    anchor_x: float = 50.0
    anchor_y: float = 200.0
    column_width: float = 250.0
    min_node_spacing: float = 20.0
    max_node_spacing: float = 50.0
    min_group_spacing: float = 10.0
    max_group_spacing: float = 40.0
    density_saturation: int = 60
    first_group_lift: float = 100.0
    later_group_lift: float = 200.0
    top_limit: float = -500.0
    cursor_start: float = -10.0

    def __post_init__(self) -> None:
        if not (0 < self.min_node_spacing <= self.max_node_spacing):
            raise ValueError(
                "node spacing bounds must satisfy 0 < min <= max, got "
                f"({self.min_node_spacing}, {self.max_node_spacing})"
            )
        if not (0 < self.min_group_spacing <= self.max_group_spacing):
            raise ValueError(
                "group spacing bounds must satisfy 0 < min <= max, got "
                f"({self.min_group_spacing}, {self.max_group_spacing})"
            )
        if self.density_saturation <= 0:
            raise ValueError(f"density_saturation must be > 0, got {self.density_saturation}")
        if self.column_width <= 0:
            raise ValueError(f"column_width must be > 0, got {self.column_width}")


DEFAULT_LAYOUT = LayoutConfig()


def compute_spacing(frequency_count: int, config: LayoutConfig = DEFAULT_LAYOUT) -> tuple[float, float]:
    """Density-adaptive (node_spacing, group_spacing) for ``frequency_count`` visible nodes."""
    factor = (config.density_saturation - frequency_count) / config.density_saturation
    factor = max(0.0, min(1.0, factor))
    node_spacing = config.min_node_spacing + (config.max_node_spacing - config.min_node_spacing) * factor
    group_spacing = (
        config.min_group_spacing + (config.max_group_spacing - config.min_group_spacing) * factor
    )
    return node_spacing, group_spacing


def layout_nodes(
    nodes: Sequence[VisibleNode],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[VisibleNode]:
    """Position every visible node.

    Args:
        nodes:  Output of TreeModel.visible_nodes() — parents precede children
        config: Spacing constants

    Returns:
        New VisibleNode objects with x and y set, in the input order. Nodes
        whose parent is not in ``nodes`` keep (0, 0).
    """
    positions: dict[str, tuple[float, float]] = {}
    for node in nodes:
        if node.kind is NodeKind.ROOT:
            positions[node.id] = (config.anchor_x, config.anchor_y)

    frequency_count = sum(1 for n in nodes if n.kind is NodeKind.FREQUENCY)
    node_spacing, group_spacing = compute_spacing(frequency_count, config)

    # depth -> parent id -> siblings, insertion-ordered
    groups: dict[int, dict[str, list[VisibleNode]]] = {}
    for node in nodes:
        if node.kind is NodeKind.ROOT or node.parent_id is None:
            continue
        groups.setdefault(node.depth, {}).setdefault(node.parent_id, []).append(node)

    for depth in sorted(groups):
        cursor = config.cursor_start
        first = True
        for parent_id, siblings in groups[depth].items():
            parent = positions.get(parent_id)
            if parent is None:
                continue
            parent_x, parent_y = parent

            if first:
                start_y = max(config.top_limit, parent_y - config.first_group_lift)
                first = False
            else:
                start_y = max(cursor, parent_y - config.later_group_lift)

            x = parent_x + config.column_width
            for index, sibling in enumerate(siblings):
                positions[sibling.id] = (x, start_y + index * node_spacing)

            group_height = (len(siblings) - 1) * node_spacing
            cursor = max(cursor, start_y + group_height + group_spacing)

    out: list[VisibleNode] = []
    for node in nodes:
        x, y = positions.get(node.id, (0.0, 0.0))
        out.append(replace(node, x=x, y=y))
    return out


def group_envelopes(nodes: Sequence[VisibleNode]) -> dict[int, list[tuple[str, float, float]]]:
    """Per depth, the (parent_id, min_y, max_y) envelope of each sibling group, in order."""
    spans: dict[int, dict[str, list[float]]] = {}
    for node in nodes:
        if node.parent_id is None:
            continue
        spans.setdefault(node.depth, {}).setdefault(node.parent_id, []).append(node.y)
    return {
        depth: [(pid, min(ys), max(ys)) for pid, ys in by_parent.items()]
        for depth, by_parent in spans.items()
    }
