"""
core/harmonics/types.py — Value objects for the recursive harmonic engine.

Every dataclass here is frozen, TreeNode included: TreeModel swaps its arena
entries with dataclasses.replace() instead of mutating them. Safe to hash
and share between the analysis functions. No I/O, no side effects, no
external dependencies beyond stdlib.

Types:
    TuningMode          — rule used to expand one frequency into several
    Leaf / Branch       — tagged nested structure (Node = Leaf | Branch)
    HarmonicStructure   — base frequency + one Branch per depth layer
    FrequencyRecord     — one path-addressed frequency of the flattened view
    ProximityPair       — two records closer than a relative threshold
    RatioApproximation  — best bounded-denominator fraction for a pair
    NodeKind            — root | frequency
    TreeNode            — lazily materialized node owned by TreeModel
    VisibleNode         — a TreeNode as seen by one layout pass
    NodeMatch           — two visible nodes closer than a relative threshold
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


def is_valid_frequency(value: float | None) -> bool:
    """True for finite, strictly positive frequencies.

    Anything else (NaN, ±inf, zero, negatives, None) is numeric degeneracy:
    filtered out silently by generation, extraction and analysis.
    """
    return value is not None and math.isfinite(value) and value > 0


# ---------------------------------------------------------------------------
# TuningMode
# ---------------------------------------------------------------------------


class TuningMode(str, Enum):
    """Tuning rule applied at every recursion step."""

    HARMONIC = "harmonic"  # f, 2f, 3f, ...
    JUST = "just"  # 13-entry just-intonation table, unison through octave
    EQUAL = "equal"  # 12-TET semitone ratios 2^(i/12)
    CUSTOM = "custom"  # caller-supplied ratios


# ---------------------------------------------------------------------------
# Nested structure — Leaf | Branch
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Leaf:
    """A single generated frequency. May be degenerate (NaN)."""

    value: float

    @property
    def depth(self) -> int:
        return 0


@dataclass(frozen=True)
class Branch:
    """An ordered group of nodes produced by one application of the tuning rule
    (or, above the innermost level, one group per parent frequency)."""

    children: tuple[Node, ...]

    @property
    def depth(self) -> int:
        """Array-nesting depth of this branch (1 for a flat list of leaves).

        An empty branch (children of a degenerate leaf) reports depth 1.
        """
        if not self.children:
            return 1
        return 1 + max(c.depth for c in self.children)

    def leaves(self) -> tuple[float, ...]:
        """All leaf values, depth-first, left-to-right."""
        out: list[float] = []
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Leaf):
                out.append(node.value)
            else:
                stack.extend(reversed(node.children))
        return tuple(out)

    def to_nested(self) -> list:
        """Render as plain nested lists of floats."""
        return [c.value if isinstance(c, Leaf) else c.to_nested() for c in self.children]


Node = Union[Leaf, Branch]


# ---------------------------------------------------------------------------
# HarmonicStructure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HarmonicStructure:
    """The full nested set of frequencies for one set of parameters.

    ``levels[0]`` is a flat Branch of leaves (first application of the tuning
    rule to ``base``). ``levels[d]`` is nested ``d + 1`` deep: the tuning rule
    applied independently to every leaf of ``levels[d - 1]``.

    Attributes:
        base:          Base frequency in Hz
        levels:        One Branch per depth, 0..max_depth
        breadth:       Requested number of children per application
        mode:          Tuning mode used at every step
        custom_ratios: Ratios used by CUSTOM mode, else None
    """

    base: float
    levels: tuple[Branch, ...]
    breadth: int
    mode: TuningMode
    custom_ratios: tuple[float, ...] | None = None

    @property
    def max_depth(self) -> int:
        return len(self.levels) - 1

    def to_nested(self) -> dict:
        """JSON-friendly rendering: ``{"base": f, "levels": [nested lists]}``."""
        return {"base": self.base, "levels": [level.to_nested() for level in self.levels]}


# ---------------------------------------------------------------------------
# Analysis records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FrequencyRecord:
    """A single frequency of the flattened structure.

    Attributes:
        frequency: Frequency in Hz
        depth:     -1 for the base frequency, else 0..max_depth
        path:      Child indices from the root; empty for the base
        label:     Canonical rendering of (depth, path), e.g. "H^2[0,3,1]"
    """

    frequency: float
    depth: int
    path: tuple[int, ...]
    label: str

    def __post_init__(self) -> None:
        if self.depth < -1:
            raise ValueError(f"FrequencyRecord.depth must be >= -1, got {self.depth}")
        if self.depth == -1 and self.path:
            raise ValueError("The base FrequencyRecord must have an empty path")
        if self.depth >= 0 and len(self.path) != self.depth + 1:
            raise ValueError(
                f"FrequencyRecord.path length must be depth + 1 ({self.depth + 1}), "
                f"got {len(self.path)}"
            )

    @property
    def is_base(self) -> bool:
        return self.depth == -1


@dataclass(frozen=True)
class ProximityPair:
    """Two distinct records whose relative difference is below a threshold.

    ``relative_difference = |freq_a - freq_b| / max(freq_a, freq_b)``.
    """

    freq_a: float
    freq_b: float
    path_a: tuple[int, ...]
    path_b: tuple[int, ...]
    depth_a: int
    depth_b: int
    label_a: str
    label_b: str
    relative_difference: float


@dataclass(frozen=True)
class RatioApproximation:
    """Closest reduced fraction ``numerator/denominator`` to ``min/max`` of a pair.

    Attributes:
        actual_ratio: min(freq_a, freq_b) / max(freq_a, freq_b), in (0, 1]
        numerator:    1 <= numerator <= denominator
        denominator:  1 <= denominator <= max_denominator
        abs_error:    |actual_ratio - numerator / denominator|
    """

    freq_a: float
    freq_b: float
    path_a: tuple[int, ...]
    path_b: tuple[int, ...]
    label_a: str
    label_b: str
    actual_ratio: float
    numerator: int
    denominator: int
    abs_error: float

    @property
    def fraction_label(self) -> str:
        """Human-readable fraction, e.g. '3/4'."""
        return f"{self.numerator}/{self.denominator}"


# ---------------------------------------------------------------------------
# Tree exploration
# ---------------------------------------------------------------------------


class NodeKind(str, Enum):
    ROOT = "root"
    FREQUENCY = "frequency"


@dataclass(frozen=True)
class TreeNode:
    """One node of the lazily expanded exploration tree.

    Stored in TreeModel's arena keyed by ``id``; ``child_ids`` lists the
    materialized children in generation order (empty until first expansion).

    Attributes:
        id:        Unique id derived from (depth, path), e.g. "root", "h1-0-2"
        name:      Display name, e.g. "880.0 Hz (H^0[1])"
        value:     Frequency in Hz
        depth:     -1 for the root, else 0..max_depth
        kind:      NodeKind.ROOT or NodeKind.FREQUENCY
        path:      Child indices from the root
        child_ids: Ids of materialized children
        materialized: True once the tuning rule has been applied to this node
    """

    id: str
    name: str
    value: float | None
    depth: int
    kind: NodeKind
    path: tuple[int, ...]
    child_ids: tuple[str, ...] = ()
    materialized: bool = False


@dataclass(frozen=True)
class VisibleNode:
    """A TreeNode as emitted by ``TreeModel.visible_nodes()`` and positioned by
    ``layout_nodes()``. Recomputed on every pass, never stored."""

    id: str
    name: str
    value: float | None
    depth: int
    kind: NodeKind
    path: tuple[int, ...]
    parent_id: str | None
    has_children: bool
    is_expanded: bool
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class NodeMatch:
    """Two visible frequency nodes whose relative difference is below a threshold."""

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
