"""
Tests for core/harmonics/ratios.py — bounded-denominator approximation.

Validates:
    - reduced fractions only, ordered by (denominator, numerator)
    - closest_fraction(0.5, 12) == (1, 2, 0.0)
    - ties go to the earliest candidate
    - approximate_ratios: min/max ratio in (0, 1], one entry per pair of the
      first pair_limit records, numerator <= denominator <= max_denominator
    - out-of-range limits raise ConfigurationError
"""

from math import gcd

import pytest

from core.harmonics.errors import ConfigurationError
from core.harmonics.paths import flatten_structure, format_label
from core.harmonics.ratios import approximate_ratios, closest_fraction, reduced_fractions
from core.harmonics.structure import build_structure
from core.harmonics.types import FrequencyRecord


def make_record(frequency: float, path: tuple[int, ...]) -> FrequencyRecord:
    depth = len(path) - 1
    return FrequencyRecord(frequency=frequency, depth=depth, path=path, label=format_label(depth, path))


class TestReducedFractions:
    def test_small_table(self):
        assert reduced_fractions(3) == ((1, 1), (1, 2), (1, 3), (2, 3))

    def test_all_reduced(self):
        for n, d in reduced_fractions(12):
            assert gcd(n, d) == 1
            assert 1 <= n <= d <= 12


class TestClosestFraction:
    def test_half(self):
        assert closest_fraction(0.5, 12) == (1, 2, 0.0)

    def test_two_thirds(self):
        n, d, err = closest_fraction(2 / 3, 12)
        assert (n, d) == (2, 3)
        assert err < 1e-12

    def test_tie_goes_to_first_candidate(self):
        # 0.75 is equally far from 1/1 and 1/2; 1/1 comes first
        assert closest_fraction(0.75, 2) == (1, 1, 0.25)

    def test_denominator_bound_respected(self):
        n, d, _ = closest_fraction(0.7071, 5)
        assert d <= 5
        assert (n, d) == (2, 3)

    def test_invalid_denominator(self):
        with pytest.raises(ConfigurationError):
            closest_fraction(0.5, 0)


class TestApproximateRatios:
    def test_octave(self):
        records = [make_record(440.0, (0,)), make_record(880.0, (1,))]
        (approx,) = approximate_ratios(records, 12, 100)
        assert approx.actual_ratio == 0.5
        assert (approx.numerator, approx.denominator, approx.abs_error) == (1, 2, 0.0)
        assert approx.fraction_label == "1/2"

    def test_ratio_is_min_over_max(self):
        records = [make_record(660.0, (0,)), make_record(440.0, (1,))]
        (approx,) = approximate_ratios(records, 12, 100)
        assert approx.actual_ratio == pytest.approx(2 / 3)
        assert (approx.numerator, approx.denominator) == (2, 3)
        assert approx.freq_a == 660.0

    def test_pair_count(self):
        records = flatten_structure(build_structure(440.0, 0, 12, "harmonic"))
        assert len(approximate_ratios(records, 12, 100)) == 13 * 12 // 2

    def test_pair_limit_truncates(self):
        records = flatten_structure(build_structure(440.0, 2, 12, "harmonic"))
        out = approximate_ratios(records, 12, 10)
        assert len(out) == 10 * 9 // 2
        window = {r.label for r in records[:10]}
        assert all(a.label_a in window and a.label_b in window for a in out)

    def test_invariants_hold(self):
        records = flatten_structure(build_structure(440.0, 1, 7, "just"))
        for a in approximate_ratios(records, 8, 50):
            assert 0 < a.actual_ratio <= 1
            assert 1 <= a.numerator <= a.denominator <= 8
            assert a.abs_error == pytest.approx(abs(a.actual_ratio - a.numerator / a.denominator))

    @pytest.mark.parametrize("max_den", [1, 25])
    def test_invalid_max_denominator(self, max_den):
        with pytest.raises(ConfigurationError, match="max_denominator"):
            approximate_ratios([], max_den, 100)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_invalid_pair_limit(self, limit):
        with pytest.raises(ConfigurationError, match="pair_limit"):
            approximate_ratios([], 12, limit)
