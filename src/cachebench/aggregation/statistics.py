"""Per-variant latency and hit-rate statistics.

compute_statistics is the contract: a pure function of the sample history.
RunningStatistics maintains the same sums incrementally. Both accumulate in
insertion order and share _build_statistics, so for the same history they
produce bit-identical snapshots.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cachebench.models.domain import (
    CACHED,
    EMPTY_STATISTICS,
    CachedVariantStatistics,
    Sample,
    Statistics,
    VariantStatistics,
)
from cachebench.store.sample_store import SampleStore


@dataclass
class _VariantTotals:
    """Internal running sums for one variant."""

    count: int = 0
    latency_sum: float = 0.0
    hits: int = 0


def _mean(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


def _build_statistics(cached: _VariantTotals, uncached: _VariantTotals) -> Statistics:
    """Turn running sums into an immutable snapshot.

    Empty variants report 0 for averages and hit rate, never NaN.
    """
    hit_rate = 100.0 * cached.hits / cached.count if cached.count > 0 else 0.0

    return Statistics(
        cached=CachedVariantStatistics(
            count=cached.count,
            avg_latency_ms=_mean(cached.latency_sum, cached.count),
            hits=cached.hits,
            hit_rate=hit_rate,
        ),
        uncached=VariantStatistics(
            count=uncached.count,
            avg_latency_ms=_mean(uncached.latency_sum, uncached.count),
        ),
        total_requests=cached.count + uncached.count,
    )


def _accumulate(cached: _VariantTotals, uncached: _VariantTotals, sample: Sample) -> None:
    if sample.variant == CACHED:
        cached.count += 1
        cached.latency_sum += sample.latency_ms
        if sample.cache_hit:
            cached.hits += 1
    else:
        uncached.count += 1
        uncached.latency_sum += sample.latency_ms


def compute_statistics(samples: Iterable[Sample]) -> Statistics:
    """Compute statistics over a sample history.

    Pure function - reads the samples, keeps no state.

    Args:
        samples: A SampleStore, one of its views, or any iterable of
            samples in insertion order.

    Returns:
        Statistics snapshot. EMPTY_STATISTICS when there are no samples.
    """
    if isinstance(samples, SampleStore):
        samples = samples.all()

    cached = _VariantTotals()
    uncached = _VariantTotals()
    for sample in samples:
        _accumulate(cached, uncached, sample)

    if cached.count == 0 and uncached.count == 0:
        return EMPTY_STATISTICS
    return _build_statistics(cached, uncached)


class RunningStatistics:
    """Incrementally maintained statistics.

    Feed every appended sample through add() and call reset() whenever the
    history is cleared; snapshot() then equals compute_statistics() over the
    same history.
    """

    def __init__(self):
        self._cached = _VariantTotals()
        self._uncached = _VariantTotals()
        self._snapshot = EMPTY_STATISTICS

    def add(self, sample: Sample) -> Statistics:
        """Account for one more sample and return the new snapshot."""
        _accumulate(self._cached, self._uncached, sample)
        self._snapshot = _build_statistics(self._cached, self._uncached)
        return self._snapshot

    def reset(self) -> Statistics:
        """Forget all samples and return the all-zero snapshot."""
        self._cached = _VariantTotals()
        self._uncached = _VariantTotals()
        self._snapshot = EMPTY_STATISTICS
        return self._snapshot

    def snapshot(self) -> Statistics:
        """Return the current snapshot."""
        return self._snapshot
