"""
core/harmonics/tree.py — Lazily expanded exploration tree.

TreeModel starts from a single root (the base frequency) and applies the
tuning rule one node at a time as the caller expands nodes. Nodes live in an
arena keyed by a deterministic id derived from (depth, path), so expand and
collapse address nodes by id and no node holds a reference to its parent.

Per-node lifecycle:

    collapsed (unmaterialized) ──expand──▶ expanded
                                              │ collapse
    collapsed (materialized)  ◀──────────────┘
              │ expand
              ▼
           expanded   (children come from the arena, rule is not re-run)

Materialized children are never evicted. Mutation is single-caller: the
model is not safe for concurrent expand/collapse.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from core.harmonics.structure import validate_shape
from core.harmonics.tuning import check_custom_ratios, generate_frequencies
from core.harmonics.types import NodeKind, TreeNode, TuningMode, VisibleNode, is_valid_frequency

ROOT_ID: str = "root"


def node_id(depth: int, path: tuple[int, ...]) -> str:
    """Deterministic node id: ``'root'`` or ``'h{depth}-{i0}-{i1}-...'``."""
    if depth < 0:
        return ROOT_ID
    return f"h{depth}-" + "-".join(str(i) for i in path)


def node_name(value: float, depth: int, path: tuple[int, ...]) -> str:
    """Display name, e.g. ``'Base: 440.00 Hz'`` or ``'880.0 Hz (H^0[1])'``."""
    if depth < 0:
        return f"Base: {value:.2f} Hz"
    return f"{value:.1f} Hz (H^{depth}[{','.join(str(i) for i in path)}])"


class TreeModel:
    """Mutable, lazily materialized mirror of the harmonic structure.

    Args:
        base:          Root frequency in Hz
        breadth:       Children per expansion
        mode:          Tuning mode
        max_depth:     Deepest child depth that may be materialized (0..3)
        custom_ratios: Ratios for custom mode

    Raises:
        ConfigurationError: Same parameter rules as build_structure().

    Example::

        tree = TreeModel(base=440.0, breadth=3, mode="harmonic", max_depth=2)
        tree.expand("root")
        [n.value for n in tree.children("root")]   # [440.0, 880.0, 1320.0]
    """

    def __init__(
        self,
        base: float,
        breadth: int,
        mode: TuningMode | str = TuningMode.HARMONIC,
        max_depth: int = 2,
        custom_ratios: Sequence[float] | None = None,
    ) -> None:
        self.mode = validate_shape(max_depth, breadth, mode)
        self.custom_ratios = (
            check_custom_ratios(custom_ratios) if self.mode is TuningMode.CUSTOM else None
        )
        self.base = base
        self.breadth = breadth
        self.max_depth = max_depth
        self._nodes: dict[str, TreeNode] = {
            ROOT_ID: TreeNode(
                id=ROOT_ID,
                name=node_name(base, -1, ()),
                value=base,
                depth=-1,
                kind=NodeKind.ROOT,
                path=(),
            )
        }
        self._expanded: set[str] = set()
        self.rule_calls = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def root(self) -> TreeNode:
        return self._nodes[ROOT_ID]

    @property
    def expanded_ids(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, nid: object) -> bool:
        return nid in self._nodes

    def get(self, nid: str) -> TreeNode:
        """Return the node with id ``nid``.

        Raises:
            KeyError: Unknown or not yet materialized id.
        """
        try:
            return self._nodes[nid]
        except KeyError:
            raise KeyError(f"Unknown tree node {nid!r}") from None

    def children(self, nid: str) -> tuple[TreeNode, ...]:
        """Materialized children of ``nid`` in generation order."""
        return tuple(self._nodes[c] for c in self.get(nid).child_ids)

    def is_expanded(self, nid: str) -> bool:
        return nid in self._expanded

    def can_expand(self, node: TreeNode) -> bool:
        """Whether expanding ``node`` can yield children at all."""
        if node.materialized:
            return bool(node.child_ids)
        if node.kind is NodeKind.ROOT:
            return is_valid_frequency(node.value)
        return node.depth + 1 <= self.max_depth and is_valid_frequency(node.value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _materialize(self, node: TreeNode) -> TreeNode:
        child_depth = node.depth + 1
        child_ids: list[str] = []
        if child_depth <= self.max_depth and is_valid_frequency(node.value):
            self.rule_calls += 1
            freqs = generate_frequencies(node.value, self.breadth, self.mode, self.custom_ratios)
            for index, value in enumerate(freqs):
                if not is_valid_frequency(value):
                    continue
                path = node.path + (index,)
                child = TreeNode(
                    id=node_id(child_depth, path),
                    name=node_name(value, child_depth, path),
                    value=value,
                    depth=child_depth,
                    kind=NodeKind.FREQUENCY,
                    path=path,
                )
                self._nodes[child.id] = child
                child_ids.append(child.id)

        updated = replace(node, child_ids=tuple(child_ids), materialized=True)
        self._nodes[node.id] = updated
        return updated

    def expand(self, nid: str) -> tuple[TreeNode, ...]:
        """Mark ``nid`` expanded, materializing its children on first use.

        Children past ``max_depth`` are never created; expanding such a node
        still marks it expanded and returns an empty tuple.

        Returns:
            The node's children.

        Raises:
            KeyError: Unknown node id.
        """
        node = self.get(nid)
        if not node.materialized:
            node = self._materialize(node)
        self._expanded.add(nid)
        return self.children(nid)

    def _is_descendant(self, candidate: TreeNode, ancestor: TreeNode) -> bool:
        if ancestor.kind is NodeKind.ROOT:
            return candidate.kind is not NodeKind.ROOT
        n = len(ancestor.path)
        return len(candidate.path) > n and candidate.path[:n] == ancestor.path

    def collapse(self, nid: str) -> None:
        """Remove ``nid`` and all of its descendants from the expanded set.

        Materialized children stay cached for the next expand.

        Raises:
            KeyError: Unknown node id.
        """
        target = self.get(nid)
        self._expanded = {
            eid
            for eid in self._expanded
            if eid != nid and not self._is_descendant(self._nodes[eid], target)
        }

    def toggle(self, nid: str) -> bool:
        """Collapse if expanded, expand otherwise. Returns the new expanded state."""
        if self.is_expanded(nid):
            self.collapse(nid)
            return False
        self.expand(nid)
        return True

    def reset(self) -> None:
        """Collapse everything. The cache is kept."""
        self._expanded.clear()

    # ------------------------------------------------------------------
    # Visible set
    # ------------------------------------------------------------------

    def visible_nodes(self) -> list[VisibleNode]:
        """Depth-first list of the root plus the children of every expanded node.

        Nodes are unpositioned (x = y = 0); pass the result to layout_nodes().
        """
        out: list[VisibleNode] = []
        stack: list[tuple[str, str | None]] = [(ROOT_ID, None)]
        while stack:
            nid, parent_id = stack.pop()
            node = self._nodes[nid]
            expanded = nid in self._expanded
            out.append(
                VisibleNode(
                    id=node.id,
                    name=node.name,
                    value=node.value,
                    depth=node.depth,
                    kind=node.kind,
                    path=node.path,
                    parent_id=parent_id,
                    has_children=self.can_expand(node),
                    is_expanded=expanded,
                )
            )
            if expanded:
                stack.extend((cid, nid) for cid in reversed(node.child_ids))
        return out
