"""
core/harmonics/structure.py — Recursive harmonic structure generator.

build_structure() applies the tuning rule to the base frequency, then again
to every frequency of the previous depth, up to ``max_depth``:

    levels[0] = T(base)                          — flat, nesting depth 1
    levels[d] = levels[d-1] with every leaf v replaced by T(v)
                                                 — nesting depth d + 1

Size grows as O(breadth^(max_depth + 1)); depth is capped at MAX_DEPTH and
breadth at the mode's limit so a single build stays interactive.

Degenerate leaves (NaN) become empty branches: they produce no children but
keep their index, so sibling paths are unaffected.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.harmonics.errors import ConfigurationError
from core.harmonics.tuning import check_custom_ratios, generate_frequencies, parse_mode
from core.harmonics.types import Branch, HarmonicStructure, Leaf, Node, TuningMode, is_valid_frequency

# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------

MAX_DEPTH: int = 3
MIN_BREADTH: int = 3
MAX_BREADTH: int = 13
MIN_CUSTOM_BREADTH: int = 2
MAX_CUSTOM_BREADTH: int = 20


def validate_shape(max_depth: int, breadth: int, mode: TuningMode | str) -> TuningMode:
    """Check depth and breadth against the limits for ``mode``.

    Returns:
        The resolved TuningMode.

    Raises:
        ConfigurationError: Unknown mode or out-of-range depth/breadth.
    """
    resolved = parse_mode(mode)
    if not (0 <= max_depth <= MAX_DEPTH):
        raise ConfigurationError(f"max_depth must be in [0, {MAX_DEPTH}], got {max_depth}")
    if resolved is TuningMode.CUSTOM:
        low, high = MIN_CUSTOM_BREADTH, MAX_CUSTOM_BREADTH
    else:
        low, high = MIN_BREADTH, MAX_BREADTH
    if not (low <= breadth <= high):
        raise ConfigurationError(
            f"breadth must be in [{low}, {high}] for {resolved.value} mode, got {breadth}"
        )
    return resolved


def _expand_leaves(
    node: Node,
    breadth: int,
    mode: TuningMode,
    custom_ratios: tuple[float, ...] | None,
) -> Branch:
    """Replace every leaf under ``node`` with the branch the tuning rule makes of it."""
    if isinstance(node, Leaf):
        if not is_valid_frequency(node.value):
            return Branch(children=())
        freqs = generate_frequencies(node.value, breadth, mode, custom_ratios)
        return Branch(children=tuple(Leaf(v) for v in freqs))
    return Branch(
        children=tuple(_expand_leaves(c, breadth, mode, custom_ratios) for c in node.children)
    )


def build_structure(
    base: float,
    max_depth: int,
    breadth: int,
    mode: TuningMode | str = TuningMode.HARMONIC,
    custom_ratios: Sequence[float] | None = None,
) -> HarmonicStructure:
    """Build the nested harmonic structure for one set of parameters.

    Args:
        base:          Base frequency in Hz
        max_depth:     Deepest level to generate, 0..MAX_DEPTH
        breadth:       Children per tuning step
        mode:          Tuning mode
        custom_ratios: Ratios for custom mode; ignored otherwise

    Returns:
        An immutable HarmonicStructure with ``max_depth + 1`` levels.

    Raises:
        ConfigurationError: Invalid mode, depth, breadth, or custom ratios.
    """
    resolved = validate_shape(max_depth, breadth, mode)
    ratios = check_custom_ratios(custom_ratios) if resolved is TuningMode.CUSTOM else None

    first = Branch(
        children=tuple(Leaf(v) for v in generate_frequencies(base, breadth, resolved, ratios))
    )
    levels: list[Branch] = [first]
    for _ in range(1, max_depth + 1):
        levels.append(_expand_leaves(levels[-1], breadth, resolved, ratios))

    return HarmonicStructure(
        base=base,
        levels=tuple(levels),
        breadth=breadth,
        mode=resolved,
        custom_ratios=ratios,
    )


def expected_record_count(breadth: int, max_depth: int) -> int:
    """``1 + b + b^2 + ... + b^(max_depth + 1)`` for an effective branching ``b``."""
    return 1 + sum(breadth ** (d + 1) for d in range(max_depth + 1))
