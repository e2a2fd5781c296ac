"""Prometheus metrics for the harmonic explorer API.

Exposes the shape of the work being done (tuning modes, structure sizes,
tree interactions) rather than only generic HTTP stats.

Metrics:
    harmonic_analysis_total             Counter of analysis generations by mode
    harmonic_analysis_latency_seconds   Histogram of build + analysis wall time
    harmonic_records_last               Gauge: record count of the latest generation
    harmonic_tree_actions_total         Counter of tree actions (create/expand/collapse/toggle/delete)
    harmonic_tree_sessions_active       Gauge of live tree sessions

Usage::

    from infrastructure.metrics import LatencyTimer, record_analysis

    with LatencyTimer() as t:
        result = analyze(config)
    record_analysis(mode="harmonic", latency_seconds=t.elapsed, record_count=result.record_count)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

analysis_total = Counter(
    "harmonic_analysis_total",
    "Analysis generations by tuning mode",
    ["mode"],
    registry=_REGISTRY,
)

analysis_latency_seconds = Histogram(
    "harmonic_analysis_latency_seconds",
    "Structure build plus analysis wall time in seconds",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
    registry=_REGISTRY,
)

records_last = Gauge(
    "harmonic_records_last",
    "Number of flattened records in the most recent generation",
    registry=_REGISTRY,
)

tree_actions_total = Counter(
    "harmonic_tree_actions_total",
    "Tree session actions",
    ["action"],
    registry=_REGISTRY,
)

tree_sessions_active = Gauge(
    "harmonic_tree_sessions_active",
    "Tree sessions currently held in memory",
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_analysis(*, mode: str, latency_seconds: float, record_count: int) -> None:
    """Record a completed analysis generation.

    Args:
        mode: Tuning mode value, e.g. "harmonic".
        latency_seconds: Build + analysis wall-clock time in seconds.
        record_count: Number of flattened records produced.
    """
    analysis_total.labels(mode=mode).inc()
    analysis_latency_seconds.observe(latency_seconds)
    records_last.set(record_count)


def record_tree_action(action: str) -> None:
    """Increment the tree action counter for ``action``."""
    tree_actions_total.labels(action=action).inc()


def set_tree_sessions(count: int) -> None:
    """Publish the current number of live tree sessions."""
    tree_sessions_active.set(count)


def get_sample(name: str, labels: dict[str, str] | None = None) -> float | None:
    """Current value of a sample in the private registry (None if never set)."""
    return _REGISTRY.get_sample_value(name, labels or {})


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = analyze(config)
        record_analysis(mode="just", latency_seconds=t.elapsed, record_count=len(result.records))
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
