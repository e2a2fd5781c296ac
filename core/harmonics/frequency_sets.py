"""
core/harmonics/frequency_sets.py — Group records into per-parent frequency sets.

The side view of the explorer draws one column per set:

    Base          the base frequency
    H^0           every depth-0 frequency
    H^d[p]        for d >= 1, the frequencies sharing parent path p = path[:d]

Sets are ordered by depth, then by parent path compared index by index.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.harmonics.paths import BASE_LABEL
from core.harmonics.types import FrequencyRecord, is_valid_frequency


@dataclass(frozen=True)
class FrequencySet:
    """One group of sibling frequencies.

    Attributes:
        name:        "Base", "H^0" or "H^d[i,j,...]"
        depth:       -1 for Base, else the depth of the members
        parent_path: Path shared by the members' parent; empty for Base and H^0
        frequencies: Member frequencies in enumeration order
    """

    name: str
    depth: int
    parent_path: tuple[int, ...]
    frequencies: tuple[float, ...]


def _set_name(depth: int, parent_path: tuple[int, ...]) -> str:
    if depth < 0:
        return BASE_LABEL
    if depth == 0:
        return "H^0"
    return f"H^{depth}[{','.join(str(i) for i in parent_path)}]"


def group_frequency_sets(records: Sequence[FrequencyRecord]) -> tuple[FrequencySet, ...]:
    """Group flattened records into named sibling sets.

    Args:
        records: Output of flatten_structure()

    Returns:
        Tuple of FrequencySet, Base first, then by (depth, parent_path).
    """
    grouped: dict[tuple[int, tuple[int, ...]], list[float]] = {}
    for record in records:
        if not is_valid_frequency(record.frequency):
            continue
        parent_path = record.path[: max(record.depth, 0)]
        grouped.setdefault((record.depth, parent_path), []).append(record.frequency)

    return tuple(
        FrequencySet(
            name=_set_name(depth, parent_path),
            depth=depth,
            parent_path=parent_path,
            frequencies=tuple(freqs),
        )
        for (depth, parent_path), freqs in sorted(grouped.items(), key=lambda item: item[0])
    )
