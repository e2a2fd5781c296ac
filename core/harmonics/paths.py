"""
core/harmonics/paths.py — Path-addressed flat view of a HarmonicStructure.

flatten_structure() is the canonical read-only enumeration used by every
analysis: the base record first, then each depth in turn, each visited
depth-first and left-to-right. A record's ``path`` is the list of indices
taken to reach its leaf; its ``label`` renders (depth, path) as "H^d[i,j,...]".
"""

from __future__ import annotations

from collections.abc import Iterator

from core.harmonics.types import Branch, FrequencyRecord, HarmonicStructure, Leaf, is_valid_frequency

BASE_LABEL: str = "Base"


def format_label(depth: int, path: tuple[int, ...]) -> str:
    """Canonical label for a record, e.g. ``format_label(2, (0, 3, 1)) == 'H^2[0,3,1]'``."""
    if depth < 0:
        return BASE_LABEL
    return f"H^{depth}[{','.join(str(i) for i in path)}]"


def _walk(branch: Branch, prefix: tuple[int, ...], remaining: int) -> Iterator[tuple[tuple[int, ...], float]]:
    """Yield (path, value) for the leaves sitting exactly ``remaining`` levels below."""
    for index, child in enumerate(branch.children):
        path = prefix + (index,)
        if remaining == 0:
            if isinstance(child, Leaf):
                yield path, child.value
        elif isinstance(child, Branch):
            yield from _walk(child, path, remaining - 1)


def iter_records(structure: HarmonicStructure) -> Iterator[FrequencyRecord]:
    """Lazily yield the records of ``flatten_structure``."""
    if is_valid_frequency(structure.base):
        yield FrequencyRecord(frequency=structure.base, depth=-1, path=(), label=BASE_LABEL)

    for depth, level in enumerate(structure.levels):
        for path, value in _walk(level, (), depth):
            if is_valid_frequency(value):
                yield FrequencyRecord(
                    frequency=value,
                    depth=depth,
                    path=path,
                    label=format_label(depth, path),
                )


def flatten_structure(structure: HarmonicStructure) -> tuple[FrequencyRecord, ...]:
    """Flatten a structure into path-addressed records.

    Args:
        structure: Output of build_structure()

    Returns:
        Tuple of FrequencyRecord: one base record (depth -1, empty path), then
        one record per valid leaf of levels[0], levels[1], ... in depth-first,
        left-to-right order. Degenerate frequencies are skipped.

    Example:
        >>> s = build_structure(440.0, 0, 3, "harmonic")
        >>> [r.label for r in flatten_structure(s)]
        ['Base', 'H^0[0]', 'H^0[1]', 'H^0[2]']
    """
    return tuple(iter_records(structure))


def records_at_depth(records: tuple[FrequencyRecord, ...], depth: int) -> tuple[FrequencyRecord, ...]:
    """Records of a single depth, in enumeration order."""
    return tuple(r for r in records if r.depth == depth)
