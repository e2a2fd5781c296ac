"""
Tests for core.config module.

These tests verify ExplorerConfig validation and predefined configurations.
"""

import dataclasses

import pytest

from core.config import (
    DEFAULT_CONFIG,
    DEFAULT_CUSTOM_RATIOS,
    EQUAL_CONFIG,
    JUST_CONFIG,
    ExplorerConfig,
)
from core.harmonics.errors import ConfigurationError
from core.harmonics.types import TuningMode


class TestExplorerConfigValidation:
    """Test ExplorerConfig parameter validation."""

    def test_default_values(self) -> None:
        config = ExplorerConfig()
        assert config.base_frequency == 440.0
        assert config.max_depth == 2
        assert config.breadth == 12
        assert config.mode is TuningMode.HARMONIC
        assert config.threshold == 0.01
        assert config.max_denominator == 12
        assert config.pair_limit == 100

    def test_mode_string_is_coerced(self) -> None:
        assert ExplorerConfig(mode="just").mode is TuningMode.JUST

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Mode must be one of"):
            ExplorerConfig(mode="werckmeister")

    def test_depth_out_of_range_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="max_depth"):
            ExplorerConfig(max_depth=4)

    def test_breadth_out_of_range_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="breadth"):
            ExplorerConfig(breadth=14)

    def test_custom_breadth_range(self) -> None:
        config = ExplorerConfig(mode="custom", breadth=20)
        assert config.breadth == 20

    def test_custom_ratios_need_two(self) -> None:
        with pytest.raises(ConfigurationError, match="at least 2"):
            ExplorerConfig(mode="custom", breadth=2, custom_ratios=(1.5,))

    def test_short_custom_ratios_ignored_outside_custom_mode(self) -> None:
        config = ExplorerConfig(custom_ratios=(1.5,))
        assert config.active_custom_ratios is None

    def test_custom_ratios_coerced_to_float_tuple(self) -> None:
        config = ExplorerConfig(mode="custom", breadth=3, custom_ratios=[1, 2, 3])
        assert config.custom_ratios == (1.0, 2.0, 3.0)
        assert config.active_custom_ratios == (1.0, 2.0, 3.0)

    @pytest.mark.parametrize("threshold", [0.0, 1.0, -0.01])
    def test_threshold_range(self, threshold: float) -> None:
        with pytest.raises(ConfigurationError, match="threshold"):
            ExplorerConfig(threshold=threshold)

    @pytest.mark.parametrize("max_den", [1, 25])
    def test_max_denominator_range(self, max_den: int) -> None:
        with pytest.raises(ConfigurationError, match="max_denominator"):
            ExplorerConfig(max_denominator=max_den)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_pair_limit_range(self, limit: int) -> None:
        with pytest.raises(ConfigurationError, match="pair_limit"):
            ExplorerConfig(pair_limit=limit)

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ExplorerConfig(breadth=1)


class TestExplorerConfigImmutability:
    """Test that ExplorerConfig is frozen."""

    def test_cannot_modify(self) -> None:
        config = ExplorerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.breadth = 5  # type: ignore[misc]

    def test_equal_configs_compare_equal(self) -> None:
        assert ExplorerConfig(mode="just", breadth=7) == ExplorerConfig(
            mode=TuningMode.JUST, breadth=7
        )

    def test_hashable(self) -> None:
        assert len({ExplorerConfig(), ExplorerConfig()}) == 1


class TestPredefinedConfigs:
    """Test predefined configuration constants."""

    def test_default_config(self) -> None:
        assert DEFAULT_CONFIG == ExplorerConfig()

    def test_just_config(self) -> None:
        assert JUST_CONFIG.mode is TuningMode.JUST
        assert JUST_CONFIG.breadth == 13

    def test_equal_config(self) -> None:
        assert EQUAL_CONFIG.mode is TuningMode.EQUAL
        assert EQUAL_CONFIG.breadth == 12

    def test_default_custom_ratios(self) -> None:
        assert DEFAULT_CUSTOM_RATIOS[0] == 1.0
        assert len(DEFAULT_CUSTOM_RATIOS) == 8
