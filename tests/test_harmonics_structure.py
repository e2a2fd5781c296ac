"""
Tests for core/harmonics/structure.py and core/harmonics/types.py — nested generation.

Validates:
    - levels[d] has nesting depth d + 1
    - leaf count at depth d is breadth^(d + 1) (effective breadth for capped modes)
    - levels[d] equals the tuning rule applied to every leaf of levels[d - 1]
    - depth / breadth limits per mode raise ConfigurationError
    - degenerate leaves become empty branches that keep sibling indices
    - frozen value objects
"""

import dataclasses
import math

import pytest

from core.harmonics.errors import ConfigurationError
from core.harmonics.structure import (
    MAX_DEPTH,
    build_structure,
    expected_record_count,
    validate_shape,
)
from core.harmonics.tuning import generate_frequencies
from core.harmonics.types import Branch, Leaf, TuningMode

# ---------------------------------------------------------------------------
# Shape
# ---------------------------------------------------------------------------


class TestShape:
    def test_one_level_per_depth(self):
        s = build_structure(440.0, 2, 3, "harmonic")
        assert len(s.levels) == 3
        assert s.max_depth == 2

    @pytest.mark.parametrize("depth", [0, 1, 2, 3])
    def test_nesting_depth(self, depth):
        s = build_structure(440.0, depth, 3, "harmonic")
        for d, level in enumerate(s.levels):
            assert level.depth == d + 1

    @pytest.mark.parametrize("breadth,depth", [(3, 2), (4, 1), (12, 0), (5, 3)])
    def test_leaf_counts(self, breadth, depth):
        s = build_structure(440.0, depth, breadth, "harmonic")
        for d, level in enumerate(s.levels):
            assert len(level.leaves()) == breadth ** (d + 1)

    def test_first_level_is_one_tuning_step(self):
        s = build_structure(440.0, 0, 3, "harmonic")
        assert s.levels[0].to_nested() == [440.0, 880.0, 1320.0]

    def test_second_level_applies_rule_to_every_leaf(self):
        s = build_structure(440.0, 1, 3, "just")
        for leaf_value, group in zip(s.levels[0].leaves(), s.levels[1].children):
            assert isinstance(group, Branch)
            assert tuple(c.value for c in group.children) == generate_frequencies(
                leaf_value, 3, "just"
            )

    def test_to_nested_is_json_friendly(self):
        nested = build_structure(100.0, 1, 3, "harmonic").to_nested()
        assert nested["base"] == 100.0
        assert nested["levels"][1][2] == [300.0, 600.0, 900.0]


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------


class TestLimits:
    def test_depth_above_max_raises(self):
        with pytest.raises(ConfigurationError, match="max_depth"):
            build_structure(440.0, MAX_DEPTH + 1, 3, "harmonic")

    def test_negative_depth_raises(self):
        with pytest.raises(ConfigurationError, match="max_depth"):
            build_structure(440.0, -1, 3, "harmonic")

    @pytest.mark.parametrize("breadth", [2, 14])
    def test_standard_mode_breadth_bounds(self, breadth):
        with pytest.raises(ConfigurationError, match="breadth"):
            build_structure(440.0, 1, breadth, "equal")

    def test_custom_mode_allows_wider_breadth(self):
        assert validate_shape(1, 2, "custom") is TuningMode.CUSTOM
        assert validate_shape(1, 20, "custom") is TuningMode.CUSTOM

    def test_custom_mode_rejects_21(self):
        with pytest.raises(ConfigurationError):
            validate_shape(1, 21, "custom")

    def test_custom_mode_requires_ratios(self):
        with pytest.raises(ConfigurationError, match="custom_ratios"):
            build_structure(440.0, 1, 3, "custom")

    def test_unknown_mode_raises(self):
        with pytest.raises(ConfigurationError):
            build_structure(440.0, 1, 3, "meantone")


# ---------------------------------------------------------------------------
# Capped modes and custom ratios
# ---------------------------------------------------------------------------


class TestEffectiveBreadth:
    def test_equal_mode_effective_breadth_12(self):
        s = build_structure(440.0, 1, 13, "equal")
        assert len(s.levels[0].leaves()) == 12
        assert len(s.levels[1].leaves()) == 144

    def test_custom_ratio_structure(self):
        s = build_structure(100.0, 1, 2, "custom", [1.0, 1.5])
        assert s.custom_ratios == (1.0, 1.5)
        assert s.levels[1].to_nested() == [[100.0, 150.0], [150.0, 225.0]]

    def test_custom_ratios_ignored_outside_custom_mode(self):
        s = build_structure(440.0, 0, 3, "harmonic", [1.0, 1.5])
        assert s.custom_ratios is None

    def test_expected_record_count(self):
        assert expected_record_count(3, 2) == 1 + 3 + 9 + 27
        assert expected_record_count(12, 0) == 13


# ---------------------------------------------------------------------------
# Degeneracy
# ---------------------------------------------------------------------------


class TestDegenerateInput:
    def test_nan_base_does_not_raise(self):
        s = build_structure(float("nan"), 2, 3, "harmonic")
        assert all(math.isnan(v) for v in s.levels[0].leaves())

    def test_nan_leaves_become_empty_branches(self):
        s = build_structure(float("nan"), 1, 3, "harmonic")
        assert s.levels[1].children == (Branch(()), Branch(()), Branch(()))
        assert s.levels[1].leaves() == ()

    def test_degenerate_leaf_keeps_sibling_indices(self):
        s = build_structure(440.0, 1, 3, "custom", [1.0, -1.0, 2.0])
        first, middle, last = s.levels[1].children
        assert middle == Branch(())
        assert len(first.children) == 3
        assert len(last.children) == 3
        assert last.children[0] == Leaf(880.0)

    def test_empty_branch_depth_is_one(self):
        assert Branch(()).depth == 1


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------


class TestFrozen:
    def test_structure_is_frozen(self):
        s = build_structure(440.0, 0, 3, "harmonic")
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.base = 432.0  # type: ignore[misc]

    def test_leaf_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Leaf(1.0).value = 2.0  # type: ignore[misc]

    def test_identical_parameters_compare_equal(self):
        assert build_structure(440.0, 2, 4, "just") == build_structure(440.0, 2, 4, "just")
