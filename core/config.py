"""
Configuration dataclasses for the harmonic explorer.

These immutable config objects bundle every parameter of one analysis
generation (structure shape, tuning mode and analysis limits), so a
whole generation can be rebuilt from a single value and compared for
equality when deciding whether a rebuild is needed.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.harmonics.errors import ConfigurationError
from core.harmonics.ratios import MAX_DENOMINATOR, MAX_PAIR_LIMIT, MIN_DENOMINATOR
from core.harmonics.structure import validate_shape
from core.harmonics.tuning import check_custom_ratios
from core.harmonics.types import TuningMode

# Ratios pre-filled in the custom-ratio input of the explorer UI.
DEFAULT_CUSTOM_RATIOS: tuple[float, ...] = (1.0, 1.25, 1.5, 1.75, 2.0, 2.25, 2.5, 2.75)


@dataclass(frozen=True)
class ExplorerConfig:
    """
    Parameters for one harmonic analysis generation.

    Attributes:
        base_frequency: Base frequency in Hz. Defaults to 440 (A4).
        max_depth: Recursion depth, 0..3. Defaults to 2 (H^0, H^1, H^2).
        breadth: Frequencies per tuning step. 3..13, or 2..20 in custom mode.
            Defaults to 12.
        mode: Tuning mode, "harmonic", "just", "equal" or "custom".
        custom_ratios: Ratios used when mode is "custom"; ignored otherwise.
        threshold: Relative-difference cut-off for close pairs, in (0, 1).
            Defaults to 0.01 (1%).
        max_denominator: Largest denominator searched by the ratio
            approximation, 2..24. Defaults to 12.
        pair_limit: Number of leading records taking part in the ratio
            approximation, 1..100. Defaults to 100.

    Example:
        >>> config = ExplorerConfig(base_frequency=432.0, mode="just", breadth=7)
        >>> result = analyze(config)
    """

    base_frequency: float = 440.0
    max_depth: int = 2
    breadth: int = 12
    mode: TuningMode = TuningMode.HARMONIC
    custom_ratios: tuple[float, ...] = DEFAULT_CUSTOM_RATIOS
    threshold: float = 0.01
    max_denominator: int = 12
    pair_limit: int = MAX_PAIR_LIMIT

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        object.__setattr__(self, "mode", validate_shape(self.max_depth, self.breadth, self.mode))
        object.__setattr__(self, "custom_ratios", tuple(float(r) for r in self.custom_ratios))
        if self.mode is TuningMode.CUSTOM:
            check_custom_ratios(self.custom_ratios)
        if not (0.0 < self.threshold < 1.0):
            raise ConfigurationError(f"threshold must be in (0, 1), got {self.threshold}")
        if not (MIN_DENOMINATOR <= self.max_denominator <= MAX_DENOMINATOR):
            raise ConfigurationError(
                f"max_denominator must be in [{MIN_DENOMINATOR}, {MAX_DENOMINATOR}], "
                f"got {self.max_denominator}"
            )
        if not (1 <= self.pair_limit <= MAX_PAIR_LIMIT):
            raise ConfigurationError(
                f"pair_limit must be in [1, {MAX_PAIR_LIMIT}], got {self.pair_limit}"
            )

    @property
    def active_custom_ratios(self) -> tuple[float, ...] | None:
        """The custom ratios if custom mode is selected, else None."""
        return self.custom_ratios if self.mode is TuningMode.CUSTOM else None


# Pre-defined configurations

DEFAULT_CONFIG = ExplorerConfig()
"""Default configuration: 440 Hz, harmonic mode, 12 per step, depth 2."""

JUST_CONFIG = ExplorerConfig(mode=TuningMode.JUST, breadth=13)
"""Full just-intonation table at every step."""

EQUAL_CONFIG = ExplorerConfig(mode=TuningMode.EQUAL, breadth=12)
"""All twelve equal-tempered semitones at every step."""
