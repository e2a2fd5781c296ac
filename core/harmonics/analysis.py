"""
core/harmonics/analysis.py — One complete analysis generation.

A generation is the structure plus everything derived from it: flattened
records, close pairs and ratio approximations. It is produced in one call and
replaced as a whole when any parameter changes; nothing in it is patched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from core.config import ExplorerConfig
from core.harmonics.paths import flatten_structure
from core.harmonics.proximity import find_close_pairs
from core.harmonics.ratios import approximate_ratios
from core.harmonics.structure import build_structure
from core.harmonics.types import (
    FrequencyRecord,
    HarmonicStructure,
    ProximityPair,
    RatioApproximation,
)


@dataclass(frozen=True)
class HarmonicAnalysis:
    """Structure and all derived analysis outputs for one ExplorerConfig."""

    config: ExplorerConfig
    structure: HarmonicStructure
    records: tuple[FrequencyRecord, ...]
    close_pairs: tuple[ProximityPair, ...]
    ratios: tuple[RatioApproximation, ...]

    @property
    def record_count(self) -> int:
        return len(self.records)


def analyze(config: ExplorerConfig) -> HarmonicAnalysis:
    """Build the structure for ``config`` and run every analysis on it."""
    structure = build_structure(
        config.base_frequency,
        config.max_depth,
        config.breadth,
        config.mode,
        config.active_custom_ratios,
    )
    records = flatten_structure(structure)
    return HarmonicAnalysis(
        config=config,
        structure=structure,
        records=records,
        close_pairs=find_close_pairs(records, config.threshold),
        ratios=approximate_ratios(records, config.max_denominator, config.pair_limit),
    )


_Diffed = TypeVar("_Diffed", ProximityPair, RatioApproximation)


def sort_by_difference(items: Sequence[_Diffed]) -> list[_Diffed]:
    """Order pairs by relative difference, or approximations by absolute error.

    Stable, so equal differences keep enumeration order.
    """
    def key(item: ProximityPair | RatioApproximation) -> float:
        if isinstance(item, ProximityPair):
            return item.relative_difference
        return item.abs_error

    return sorted(items, key=key)
