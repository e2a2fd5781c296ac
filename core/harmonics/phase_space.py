"""
core/harmonics/phase_space.py — Two-step ratio phase space.

For a chain base → h0 → h1 → h2 through the structure, plot

    x = h1 / h0      (ratio of the first recursion step)
    y = h2 / h1      (ratio of the second recursion step)

Points on the diagonal x == y are "stable": the same ratio repeats at both
steps. Requires a structure of depth >= 2; shallower input gives no points.

Only a sample of the structure is used (first ``h0_limit`` depth-0
frequencies, first ``h1_limit`` children of each, first ``h2_limit``
grandchildren of those) and only ratios inside ``ratio_bounds`` are kept.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from core.harmonics.types import FrequencyRecord, is_valid_frequency

DEFAULT_STABILITY_TOLERANCE: float = 0.05
DEFAULT_RATIO_BOUNDS: tuple[float, float] = (1.0, 8.0)


@dataclass(frozen=True)
class PhaseSpacePoint:
    """One (h1/h0, h2/h1) sample.

    Attributes:
        x / y:           Step ratios
        path_key:        "i-j-k" indices of the h0, h1 and h2 along the chain
        is_stable:       |x - y| < stability tolerance
        stability_error: |x - y|
        avg_ratio:       (x + y) / 2
    """

    x: float
    y: float
    path_key: str
    is_stable: bool
    stability_error: float
    avg_ratio: float


def _children_index(records: Sequence[FrequencyRecord]) -> dict[tuple[int, ...], list[FrequencyRecord]]:
    index: dict[tuple[int, ...], list[FrequencyRecord]] = {}
    for record in records:
        if record.depth >= 1 and is_valid_frequency(record.frequency):
            index.setdefault(record.path[:-1], []).append(record)
    return index


def phase_space_points(
    records: Sequence[FrequencyRecord],
    *,
    h0_limit: int = 8,
    h1_limit: int = 8,
    h2_limit: int = 4,
    stability_tolerance: float = DEFAULT_STABILITY_TOLERANCE,
    ratio_bounds: tuple[float, float] = DEFAULT_RATIO_BOUNDS,
) -> tuple[PhaseSpacePoint, ...]:
    """Sample (h1/h0, h2/h1) points from a flattened structure.

    Args:
        records:             Output of flatten_structure()
        h0_limit:            Depth-0 frequencies sampled
        h1_limit:            Children sampled per h0
        h2_limit:            Children sampled per h1
        stability_tolerance: Max |x - y| for a point to count as stable
        ratio_bounds:        Inclusive (low, high) range both ratios must fall in

    Returns:
        Tuple of PhaseSpacePoint in traversal order.
    """
    low, high = ratio_bounds
    h0s = [r for r in records if r.depth == 0 and is_valid_frequency(r.frequency)][:h0_limit]
    children = _children_index(records)

    points: list[PhaseSpacePoint] = []
    for h0 in h0s:
        for h1 in children.get(h0.path, [])[:h1_limit]:
            for h2 in children.get(h1.path, [])[:h2_limit]:
                x = h1.frequency / h0.frequency
                y = h2.frequency / h1.frequency
                if not (low <= x <= high and low <= y <= high):
                    continue
                error = abs(x - y)
                points.append(
                    PhaseSpacePoint(
                        x=x,
                        y=y,
                        path_key="-".join(str(i) for i in h2.path),
                        is_stable=error < stability_tolerance,
                        stability_error=error,
                        avg_ratio=(x + y) / 2,
                    )
                )
    return tuple(points)


def diagonal_reference(
    points: Sequence[PhaseSpacePoint],
    samples: int = 50,
    ratio_bounds: tuple[float, float] = DEFAULT_RATIO_BOUNDS,
) -> tuple[tuple[float, float], ...]:
    """The y = x line across the points' range, clipped to ``ratio_bounds``.

    Returns ``samples + 1`` evenly spaced (r, r) pairs, or () without points.
    """
    if not points:
        return ()
    xs = np.array([p.x for p in points])
    ys = np.array([p.y for p in points])
    start = max(ratio_bounds[0], float(np.minimum(xs, ys).min()))
    stop = min(ratio_bounds[1], float(np.maximum(xs, ys).max()))
    return tuple((float(r), float(r)) for r in np.linspace(start, stop, samples + 1))
