"""
core/harmonics/ratios.py — Bounded-denominator rational approximation.

For every unordered pair among the first ``pair_limit`` records, the ratio
``min/max`` (always in (0, 1]) is matched against every reduced fraction
n/d with 1 <= n <= d <= max_denominator. The closest one wins; ties go to
the first candidate in ascending (d, n) order.

Cost is O(pair_limit^2 * max_denominator^2); the candidate list is built
once per call so the inner loop is a plain scan.
"""

from __future__ import annotations

from collections.abc import Sequence
from math import gcd

from core.harmonics.errors import ConfigurationError
from core.harmonics.types import FrequencyRecord, RatioApproximation, is_valid_frequency

MIN_DENOMINATOR: int = 2
MAX_DENOMINATOR: int = 24
MAX_PAIR_LIMIT: int = 100


def reduced_fractions(max_denominator: int) -> tuple[tuple[int, int], ...]:
    """All reduced (n, d) with 1 <= n <= d <= max_denominator, ordered by (d, n)."""
    return tuple(
        (n, d)
        for d in range(1, max_denominator + 1)
        for n in range(1, d + 1)
        if gcd(n, d) == 1
    )


def _best(ratio: float, candidates: Sequence[tuple[int, int]]) -> tuple[int, int, float]:
    best_n, best_d, best_err = 0, 0, float("inf")
    for n, d in candidates:
        err = abs(ratio - n / d)
        if err < best_err:
            best_n, best_d, best_err = n, d, err
    return best_n, best_d, best_err


def closest_fraction(ratio: float, max_denominator: int) -> tuple[int, int, float]:
    """Closest reduced fraction to ``ratio`` with denominator <= max_denominator.

    Returns:
        (numerator, denominator, abs_error)

    Example:
        >>> closest_fraction(0.5, 12)
        (1, 2, 0.0)
    """
    if max_denominator < 1:
        raise ConfigurationError(f"max_denominator must be >= 1, got {max_denominator}")
    return _best(ratio, reduced_fractions(max_denominator))


def approximate_ratios(
    records: Sequence[FrequencyRecord],
    max_denominator: int = 12,
    pair_limit: int = MAX_PAIR_LIMIT,
) -> tuple[RatioApproximation, ...]:
    """Closest simple ratio for every pair among the first ``pair_limit`` records.

    Args:
        records:         Output of flatten_structure()
        max_denominator: Largest denominator searched, 2..24
        pair_limit:      Only records[:pair_limit] take part, 1..100

    Returns:
        Tuple of RatioApproximation in (i, j) enumeration order.

    Raises:
        ConfigurationError: max_denominator or pair_limit out of range.
    """
    if not (MIN_DENOMINATOR <= max_denominator <= MAX_DENOMINATOR):
        raise ConfigurationError(
            f"max_denominator must be in [{MIN_DENOMINATOR}, {MAX_DENOMINATOR}], "
            f"got {max_denominator}"
        )
    if not (1 <= pair_limit <= MAX_PAIR_LIMIT):
        raise ConfigurationError(f"pair_limit must be in [1, {MAX_PAIR_LIMIT}], got {pair_limit}")

    candidates = reduced_fractions(max_denominator)
    window = [r for r in records[:pair_limit] if is_valid_frequency(r.frequency)]

    out: list[RatioApproximation] = []
    for i, a in enumerate(window):
        for b in window[i + 1 :]:
            low, high = sorted((a.frequency, b.frequency))
            actual = low / high
            n, d, err = _best(actual, candidates)
            out.append(
                RatioApproximation(
                    freq_a=a.frequency,
                    freq_b=b.frequency,
                    path_a=a.path,
                    path_b=b.path,
                    label_a=a.label,
                    label_b=b.label,
                    actual_ratio=actual,
                    numerator=n,
                    denominator=d,
                    abs_error=err,
                )
            )
    return tuple(out)
