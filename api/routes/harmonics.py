"""
api/routes/harmonics.py — Harmonic structure analysis endpoints.

Endpoints:
    POST /harmonics/analyze       — Build structure, flatten, close pairs, ratios
    POST /harmonics/distribution  — Frequency histogram of the flattened structure
    POST /harmonics/sets          — Per-parent frequency sets (side view)
    POST /harmonics/phase-space   — (h1/h0, h2/h1) ratio points

All endpoints delegate to core/harmonics — pure, deterministic computation.
Every call builds a fresh generation; nothing is cached between requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from api.schemas.harmonics import (
    AnalyzeRequest,
    AnalyzeResponse,
    DistributionBinOut,
    DistributionRequest,
    DistributionResponse,
    FrequencyRecordOut,
    FrequencySetOut,
    FrequencySetsResponse,
    PhaseSpacePointOut,
    PhaseSpaceRequest,
    PhaseSpaceResponse,
    ProximityPairOut,
    RatioApproximationOut,
    StructureParams,
)
from core.harmonics.analysis import analyze, sort_by_difference
from core.harmonics.distribution import frequency_distribution
from core.harmonics.errors import ConfigurationError
from core.harmonics.frequency_sets import group_frequency_sets
from core.harmonics.paths import flatten_structure
from core.harmonics.phase_space import diagonal_reference, phase_space_points
from core.harmonics.structure import build_structure
from core.harmonics.types import FrequencyRecord
from infrastructure.metrics import LatencyTimer, record_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/harmonics", tags=["harmonics"])


def _records_for(params: StructureParams) -> tuple[FrequencyRecord, ...]:
    """Build and flatten the structure for ``params``, mapping config errors to 422."""
    try:
        structure = build_structure(
            params.base_frequency,
            params.max_depth,
            params.breadth,
            params.mode,
            params.ratios_or_default() if params.mode == "custom" else None,
        )
    except ConfigurationError as exc:
        logger.warning("Rejected structure parameters: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return flatten_structure(structure)


# ---------------------------------------------------------------------------
# POST /harmonics/analyze
# ---------------------------------------------------------------------------


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_structure(request: AnalyzeRequest) -> AnalyzeResponse:
    """Build the harmonic structure and run proximity and ratio analysis.

    Args:
        request: AnalyzeRequest with structure parameters and analysis limits.

    Returns:
        AnalyzeResponse with records, close pairs and ratio approximations.

    Raises:
        422: Invalid mode / breadth / custom ratio combination.
    """
    try:
        config = request.to_config()
        with LatencyTimer() as timer:
            result = analyze(config)
    except ConfigurationError as exc:
        logger.warning("Rejected analysis parameters: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_analysis(
        mode=config.mode.value,
        latency_seconds=timer.elapsed,
        record_count=result.record_count,
    )
    logger.debug(
        "Analysis mode=%s depth=%d breadth=%d: %d records, %d close pairs, %.1f ms",
        config.mode.value,
        config.max_depth,
        config.breadth,
        result.record_count,
        len(result.close_pairs),
        timer.elapsed * 1000,
    )

    pairs = sort_by_difference(result.close_pairs) if request.sort_by_difference else result.close_pairs
    ratios = sort_by_difference(result.ratios) if request.sort_by_difference else result.ratios

    return AnalyzeResponse(
        mode=config.mode.value,
        base_frequency=config.base_frequency,
        max_depth=config.max_depth,
        breadth=config.breadth,
        record_count=result.record_count,
        records=[
            FrequencyRecordOut(frequency=r.frequency, depth=r.depth, path=list(r.path), label=r.label)
            for r in result.records
        ]
        if request.include_records
        else [],
        close_pairs=[
            ProximityPairOut(
                freq_a=p.freq_a,
                freq_b=p.freq_b,
                label_a=p.label_a,
                label_b=p.label_b,
                path_a=list(p.path_a),
                path_b=list(p.path_b),
                depth_a=p.depth_a,
                depth_b=p.depth_b,
                relative_difference=p.relative_difference,
                percent_difference=p.relative_difference * 100,
            )
            for p in pairs
        ],
        ratios=[
            RatioApproximationOut(
                freq_a=r.freq_a,
                freq_b=r.freq_b,
                label_a=r.label_a,
                label_b=r.label_b,
                actual_ratio=r.actual_ratio,
                numerator=r.numerator,
                denominator=r.denominator,
                fraction=r.fraction_label,
                abs_error=r.abs_error,
            )
            for r in ratios
        ],
        structure=result.structure.to_nested() if request.include_structure else None,
    )


# ---------------------------------------------------------------------------
# POST /harmonics/distribution
# ---------------------------------------------------------------------------


@router.post("/distribution", response_model=DistributionResponse)
def distribution(request: DistributionRequest) -> DistributionResponse:
    """Histogram of all frequencies in the structure, non-empty bins only."""
    records = _records_for(request)
    bins = frequency_distribution(records, request.bin_size)
    return DistributionResponse(
        bin_size=request.bin_size,
        bins=[DistributionBinOut(start=b.start, count=b.count) for b in bins],
    )


# ---------------------------------------------------------------------------
# POST /harmonics/sets
# ---------------------------------------------------------------------------


@router.post("/sets", response_model=FrequencySetsResponse)
def frequency_sets(request: StructureParams) -> FrequencySetsResponse:
    """Frequencies grouped by parent: Base, H^0, H^1[i], H^2[i,j], ..."""
    records = _records_for(request)
    return FrequencySetsResponse(
        sets=[
            FrequencySetOut(
                name=s.name,
                depth=s.depth,
                parent_path=list(s.parent_path),
                frequencies=list(s.frequencies),
            )
            for s in group_frequency_sets(records)
        ]
    )


# ---------------------------------------------------------------------------
# POST /harmonics/phase-space
# ---------------------------------------------------------------------------


@router.post("/phase-space", response_model=PhaseSpaceResponse)
def phase_space(request: PhaseSpaceRequest) -> PhaseSpaceResponse:
    """Step-ratio phase space. Requires max_depth >= 2.

    Raises:
        422: max_depth below 2 or invalid structure parameters.
    """
    if request.max_depth < 2:
        raise HTTPException(status_code=422, detail="phase space needs max_depth >= 2")

    records = _records_for(request)
    points = phase_space_points(records, stability_tolerance=request.stability_tolerance)
    return PhaseSpaceResponse(
        points=[
            PhaseSpacePointOut(
                x=p.x,
                y=p.y,
                path_key=p.path_key,
                is_stable=p.is_stable,
                stability_error=p.stability_error,
                avg_ratio=p.avg_ratio,
            )
            for p in points
        ],
        stable_count=sum(1 for p in points if p.is_stable),
        diagonal=list(diagonal_reference(points, samples=request.diagonal_samples)),
    )
