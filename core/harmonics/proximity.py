"""
core/harmonics/proximity.py — Near-coincidence detection.

Two frequencies are "close" when

    relative_difference = |a - b| / max(a, b)

lies strictly between 0 and the threshold. Exact coincidences (0) are not
reported. Every qualifying unordered pair (i < j) is reported once, in
(i, j) enumeration order, so the output order follows the input order rather
than the difference.

Pairs are found with a sorted sweep rather than by visiting all n^2 pairs:
for a fixed lower frequency the relative difference only grows as the upper
one rises, so each scan stops at the first partner outside the threshold.
Cost is O(n log n + k) for k reported pairs.

Exports:
    relative_difference(a, b) → float
    find_close_pairs(records, threshold) → tuple[ProximityPair, ...]
    find_close_nodes(nodes, threshold) → tuple[NodeMatch, ...]
"""

from __future__ import annotations

from collections.abc import Sequence

from core.harmonics.errors import ConfigurationError
from core.harmonics.types import (
    FrequencyRecord,
    NodeKind,
    NodeMatch,
    ProximityPair,
    VisibleNode,
    is_valid_frequency,
)


def relative_difference(a: float, b: float) -> float:
    """``|a - b| / max(a, b)`` for two positive frequencies."""
    return abs(a - b) / max(a, b)


def _check_threshold(threshold: float) -> None:
    if not (0.0 < threshold < 1.0):
        raise ConfigurationError(f"threshold must be in (0, 1), got {threshold}")


def _close_index_pairs(freqs: Sequence[float], threshold: float) -> list[tuple[int, int, float]]:
    """(i, j, diff) for every i < j with ``0 < diff < threshold``, sorted by (i, j).

    Equal frequencies are grouped into runs first, so exact coincidences are
    skipped as a block instead of pair by pair.
    """
    order = sorted(range(len(freqs)), key=freqs.__getitem__)
    runs: list[list[int]] = []
    for idx in order:
        if runs and freqs[runs[-1][0]] == freqs[idx]:
            runs[-1].append(idx)
        else:
            runs.append([idx])

    found: list[tuple[int, int, float]] = []
    for r, low in enumerate(runs):
        f_low = freqs[low[0]]
        s = r + 1
        while s < len(runs):
            high = runs[s]
            diff = relative_difference(f_low, freqs[high[0]])
            if diff >= threshold:
                break
            for a in low:
                for b in high:
                    found.append((a, b, diff) if a < b else (b, a, diff))
            s += 1

    found.sort()
    return found


def find_close_pairs(records: Sequence[FrequencyRecord], threshold: float) -> tuple[ProximityPair, ...]:
    """All unordered record pairs with ``0 < relative_difference < threshold``.

    Args:
        records:   Output of flatten_structure()
        threshold: Relative-difference cut-off in (0, 1), e.g. 0.01 for 1%

    Returns:
        Tuple of ProximityPair in (i, j) enumeration order.

    Raises:
        ConfigurationError: threshold outside (0, 1).
    """
    _check_threshold(threshold)
    valid = [r for r in records if is_valid_frequency(r.frequency)]

    pairs: list[ProximityPair] = []
    for i, j, diff in _close_index_pairs([r.frequency for r in valid], threshold):
        a, b = valid[i], valid[j]
        pairs.append(
            ProximityPair(
                freq_a=a.frequency,
                freq_b=b.frequency,
                path_a=a.path,
                path_b=b.path,
                depth_a=a.depth,
                depth_b=b.depth,
                label_a=a.label,
                label_b=b.label,
                relative_difference=diff,
            )
        )
    return tuple(pairs)


def find_close_nodes(nodes: Sequence[VisibleNode], threshold: float) -> tuple[NodeMatch, ...]:
    """Close pairs among the currently visible frequency nodes of a tree.

    Same criterion as find_close_pairs(), applied to positioned nodes so the
    caller can draw a link between the two coordinates. The root is ignored.
    """
    _check_threshold(threshold)
    freq_nodes = [
        n for n in nodes if n.kind is NodeKind.FREQUENCY and is_valid_frequency(n.value)
    ]

    matches: list[NodeMatch] = []
    for i, j, diff in _close_index_pairs([n.value for n in freq_nodes], threshold):  # type: ignore[arg-type]
        a, b = freq_nodes[i], freq_nodes[j]
        matches.append(
            NodeMatch(
                id_a=a.id,
                id_b=b.id,
                name_a=a.name,
                name_b=b.name,
                freq_a=a.value,  # type: ignore[arg-type]
                freq_b=b.value,  # type: ignore[arg-type]
                x_a=a.x,
                y_a=a.y,
                x_b=b.x,
                y_b=b.y,
                relative_difference=diff,
            )
        )
    return tuple(matches)
