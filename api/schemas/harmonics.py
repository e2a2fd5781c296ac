"""
api/schemas/harmonics.py — Pydantic request/response schemas for harmonic analysis.

Covers:
    /harmonics/analyze       — AnalyzeRequest / AnalyzeResponse
    /harmonics/distribution  — DistributionRequest / DistributionResponse
    /harmonics/sets          — StructureParams / FrequencySetsResponse
    /harmonics/phase-space   — PhaseSpaceRequest / PhaseSpaceResponse

Custom ratios may be sent as a JSON list or as the comma-separated string
typed into the explorer's input box ("1, 1.25, 1.5"). Entries that are not
positive numbers are dropped; 2–20 must remain.
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from core.config import DEFAULT_CUSTOM_RATIOS, ExplorerConfig

MIN_CUSTOM_RATIOS = 2
MAX_CUSTOM_RATIOS = 20

TuningModeName = Literal["harmonic", "just", "equal", "custom"]


def parse_custom_ratios(value: str | list[float]) -> list[float]:
    """Parse custom ratios from a comma-separated string or a list.

    Unparseable, non-finite and non-positive entries are dropped.

    Raises:
        ValueError: Fewer than 2 or more than 20 usable ratios remain.
    """
    raw = value.split(",") if isinstance(value, str) else list(value)
    ratios: list[float] = []
    for item in raw:
        try:
            number = float(item.strip()) if isinstance(item, str) else float(item)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number) and number > 0:
            ratios.append(number)
    if not (MIN_CUSTOM_RATIOS <= len(ratios) <= MAX_CUSTOM_RATIOS):
        raise ValueError(
            f"custom_ratios must contain {MIN_CUSTOM_RATIOS}-{MAX_CUSTOM_RATIOS} positive numbers, "
            f"got {len(ratios)}"
        )
    return ratios


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class StructureParams(BaseModel):
    """Parameters that define the harmonic structure."""

    base_frequency: float = Field(default=440.0, gt=0.0, le=20_000.0, description="Base frequency in Hz.")
    max_depth: int = Field(default=2, ge=0, le=3, description="Recursion depth (0–3).")
    breadth: int = Field(
        default=12,
        ge=2,
        le=20,
        description="Frequencies per tuning step (3–13; 2–20 in custom mode).",
    )
    mode: TuningModeName = Field(default="harmonic", description="Tuning mode.")
    custom_ratios: list[float] | None = Field(
        default=None,
        description="Ratios for custom mode, as a list or a comma-separated string.",
    )

    @field_validator("custom_ratios", mode="before")
    @classmethod
    def parse_ratios(cls, v: object) -> list[float] | None:
        """Accept a list or the comma-separated input-box format."""
        if v is None:
            return None
        if isinstance(v, (str, list, tuple)):
            return parse_custom_ratios(v if isinstance(v, str) else list(v))
        raise ValueError("custom_ratios must be a list of numbers or a comma-separated string")

    def ratios_or_default(self) -> tuple[float, ...]:
        return tuple(self.custom_ratios) if self.custom_ratios else DEFAULT_CUSTOM_RATIOS


class AnalyzeRequest(StructureParams):
    """Request body for POST /harmonics/analyze."""

    threshold: float = Field(
        default=0.01, gt=0.0, lt=1.0, description="Relative-difference cut-off for close pairs."
    )
    max_denominator: int = Field(
        default=12, ge=2, le=24, description="Largest denominator for ratio approximation."
    )
    pair_limit: int = Field(
        default=100, ge=1, le=100, description="Leading records included in ratio approximation."
    )
    sort_by_difference: bool = Field(
        default=True,
        description="Sort pairs and ratios by ascending difference instead of enumeration order.",
    )
    include_records: bool = Field(default=True, description="Include the flattened record list.")
    include_structure: bool = Field(default=False, description="Include the nested structure.")

    def to_config(self) -> ExplorerConfig:
        """Build the core ExplorerConfig. Raises ConfigurationError on bad combinations."""
        return ExplorerConfig(
            base_frequency=self.base_frequency,
            max_depth=self.max_depth,
            breadth=self.breadth,
            mode=self.mode,
            custom_ratios=self.ratios_or_default(),
            threshold=self.threshold,
            max_denominator=self.max_denominator,
            pair_limit=self.pair_limit,
        )


class DistributionRequest(StructureParams):
    """Request body for POST /harmonics/distribution."""

    bin_size: float = Field(default=50.0, gt=0.0, le=10_000.0, description="Histogram bin width in Hz.")


class PhaseSpaceRequest(StructureParams):
    """Request body for POST /harmonics/phase-space (needs max_depth >= 2)."""

    stability_tolerance: float = Field(default=0.05, gt=0.0, le=1.0)
    diagonal_samples: int = Field(default=50, ge=2, le=500)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class FrequencyRecordOut(BaseModel):
    """One flattened frequency."""

    frequency: float
    depth: int = Field(..., ge=-1)
    path: list[int]
    label: str


class ProximityPairOut(BaseModel):
    """Two frequencies within the relative threshold."""

    freq_a: float
    freq_b: float
    label_a: str
    label_b: str
    path_a: list[int]
    path_b: list[int]
    depth_a: int
    depth_b: int
    relative_difference: float
    percent_difference: float


class RatioApproximationOut(BaseModel):
    """Closest simple fraction for a pair."""

    freq_a: float
    freq_b: float
    label_a: str
    label_b: str
    actual_ratio: float
    numerator: int
    denominator: int
    fraction: str
    abs_error: float


class AnalyzeResponse(BaseModel):
    """Response body for POST /harmonics/analyze."""

    mode: str
    base_frequency: float
    max_depth: int
    breadth: int
    record_count: int
    records: list[FrequencyRecordOut] = Field(default_factory=list)
    close_pairs: list[ProximityPairOut]
    ratios: list[RatioApproximationOut]
    structure: dict | None = None


class DistributionBinOut(BaseModel):
    start: float
    count: int = Field(..., ge=1)


class DistributionResponse(BaseModel):
    """Response body for POST /harmonics/distribution."""

    bin_size: float
    bins: list[DistributionBinOut]


class FrequencySetOut(BaseModel):
    name: str
    depth: int
    parent_path: list[int]
    frequencies: list[float]


class FrequencySetsResponse(BaseModel):
    """Response body for POST /harmonics/sets."""

    sets: list[FrequencySetOut]


class PhaseSpacePointOut(BaseModel):
    x: float
    y: float
    path_key: str
    is_stable: bool
    stability_error: float
    avg_ratio: float


class PhaseSpaceResponse(BaseModel):
    """Response body for POST /harmonics/phase-space."""

    points: list[PhaseSpacePointOut]
    stable_count: int
    diagonal: list[tuple[float, float]]
