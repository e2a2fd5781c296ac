"""
core/harmonics/distribution.py — Frequency histogram over a flattened structure.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from core.harmonics.errors import ConfigurationError
from core.harmonics.types import FrequencyRecord, is_valid_frequency

DEFAULT_BIN_SIZE: float = 50.0


@dataclass(frozen=True)
class DistributionBin:
    """Count of frequencies in ``[start, start + bin_size)``."""

    start: float
    count: int


def frequency_distribution(
    records: Sequence[FrequencyRecord],
    bin_size: float = DEFAULT_BIN_SIZE,
) -> tuple[DistributionBin, ...]:
    """Histogram of record frequencies in fixed-width bins anchored at 0 Hz.

    Only non-empty bins are returned, in ascending order. Degenerate
    frequencies are ignored.

    Raises:
        ConfigurationError: bin_size <= 0.
    """
    if not bin_size > 0:
        raise ConfigurationError(f"bin_size must be > 0, got {bin_size}")

    freqs = np.array([r.frequency for r in records if is_valid_frequency(r.frequency)], dtype=float)
    if freqs.size == 0:
        return ()

    starts = np.floor(freqs / bin_size) * bin_size
    values, counts = np.unique(starts, return_counts=True)
    return tuple(
        DistributionBin(start=float(v), count=int(c)) for v, c in zip(values, counts)
    )
