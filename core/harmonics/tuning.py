"""
core/harmonics/tuning.py — Tuning rules: one frequency → an ordered set of frequencies.

Exports:
    JUST_INTONATION_RATIOS      13 just ratios, unison through octave
    EQUAL_TEMPERAMENT_RATIOS    12 equal-tempered semitone ratios 2^(i/12)
    MIN_CUSTOM_RATIOS           minimum number of custom ratios (2)

    parse_mode(mode) → TuningMode
    generate_frequencies(f, breadth, mode, custom_ratios) → tuple[float, ...]

Boundaries:
    - ``just`` caps the result at the table size (13). Asking for more is not
      an error; the result is simply shorter than ``breadth``.
    - ``equal`` likewise caps at 12 and ``custom`` at len(custom_ratios).
    - A degenerate input frequency (NaN, inf, <= 0) yields NaNs, never raises.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.harmonics.errors import ConfigurationError
from core.harmonics.types import TuningMode, is_valid_frequency

# ---------------------------------------------------------------------------
# Ratio tables
# ---------------------------------------------------------------------------

JUST_INTONATION_RATIOS: dict[str, float] = {
    "P1": 1 / 1,  # perfect unison
    "m2": 16 / 15,  # minor second
    "M2": 9 / 8,  # major second
    "m3": 6 / 5,  # minor third
    "M3": 5 / 4,  # major third
    "P4": 4 / 3,  # perfect fourth
    "A4": 45 / 32,  # augmented fourth
    "P5": 3 / 2,  # perfect fifth
    "m6": 8 / 5,  # minor sixth
    "M6": 5 / 3,  # major sixth
    "m7": 9 / 5,  # minor seventh
    "M7": 15 / 8,  # major seventh
    "P8": 2 / 1,  # perfect octave
}

_JUST_SORTED: tuple[float, ...] = tuple(sorted(JUST_INTONATION_RATIOS.values()))

EQUAL_TEMPERAMENT_RATIOS: tuple[float, ...] = tuple(2.0 ** (i / 12) for i in range(12))

MIN_CUSTOM_RATIOS: int = 2


def parse_mode(mode: TuningMode | str) -> TuningMode:
    """Coerce a mode name to TuningMode. Names match the enum values exactly.

    Raises:
        ConfigurationError: Unknown mode.
    """
    if isinstance(mode, TuningMode):
        return mode
    try:
        return TuningMode(mode)
    except ValueError as exc:
        valid = ", ".join(repr(m.value) for m in TuningMode)
        raise ConfigurationError(f"Mode must be one of {valid}, got {mode!r}") from exc


def check_custom_ratios(custom_ratios: Sequence[float] | None) -> tuple[float, ...]:
    """Return custom ratios as a tuple, or raise if absent or too short."""
    if custom_ratios is None:
        raise ConfigurationError("Custom mode requires custom_ratios")
    ratios = tuple(float(r) for r in custom_ratios)
    if len(ratios) < MIN_CUSTOM_RATIOS:
        raise ConfigurationError(
            f"Custom mode requires at least {MIN_CUSTOM_RATIOS} ratios, got {len(ratios)}"
        )
    return ratios


def _ratios_for(mode: TuningMode, breadth: int, custom_ratios: Sequence[float] | None) -> Sequence[float]:
    if mode is TuningMode.HARMONIC:
        return range(1, breadth + 1)
    if mode is TuningMode.JUST:
        return _JUST_SORTED[:breadth]
    if mode is TuningMode.EQUAL:
        return EQUAL_TEMPERAMENT_RATIOS[:breadth]
    return check_custom_ratios(custom_ratios)[:breadth]


def generate_frequencies(
    f: float,
    breadth: int,
    mode: TuningMode | str = TuningMode.HARMONIC,
    custom_ratios: Sequence[float] | None = None,
) -> tuple[float, ...]:
    """Apply one tuning rule step to ``f``.

    Args:
        f:             Frequency to expand, in Hz
        breadth:       Number of frequencies requested
        mode:          "harmonic", "just", "equal" or "custom"
        custom_ratios: Ratios for custom mode (first ``breadth`` are used)

    Returns:
        Ascending-ratio tuple of ``f * ratio``. Length is ``breadth`` except
        where the mode's table is shorter (just: 13, equal: 12, custom:
        len(custom_ratios)). All NaN when ``f`` is degenerate.

    Raises:
        ConfigurationError: Unknown mode, or custom mode without at least two
            ratios.

    Example:
        >>> generate_frequencies(440.0, 3, "harmonic")
        (440.0, 880.0, 1320.0)
    """
    resolved = parse_mode(mode)
    ratios = _ratios_for(resolved, max(breadth, 0), custom_ratios)
    if not is_valid_frequency(f):
        return tuple(float("nan") for _ in ratios)
    return tuple(f * r for r in ratios)
