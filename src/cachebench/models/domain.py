"""Domain models for cachebench.

Pure Python dataclasses representing timed samples, derived statistics and
the session view. These models are independent of pydantic and FastAPI and
are used throughout the core; the API layer converts them to response models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


# ============================================================================
# Sample Domain
# ============================================================================

Variant = Literal["cached", "uncached"]

CACHED: Variant = "cached"
UNCACHED: Variant = "uncached"
VARIANTS: tuple[Variant, ...] = (CACHED, UNCACHED)


@dataclass(frozen=True)
class Sample:
    """One timed outcome of a single test invocation.

    Attributes:
        variant: Code path that produced the outcome.
        latency_ms: Measured round-trip time in milliseconds.
        cache_hit: Whether the cached path found an entry. Set only for the
            cached variant, None for the uncached one.
        item_count: Number of items in the returned payload (display only).
        captured_at: Timezone-aware capture time.
    """

    variant: Variant
    latency_ms: float
    cache_hit: bool | None
    item_count: int
    captured_at: datetime


# ============================================================================
# Statistics Domain
# ============================================================================


@dataclass(frozen=True)
class VariantStatistics:
    """Summary of one variant's samples."""

    count: int = 0
    avg_latency_ms: float = 0.0


@dataclass(frozen=True)
class CachedVariantStatistics(VariantStatistics):
    """Summary of the cached variant, including hit accounting.

    hit_rate is a percentage in [0, 100].
    """

    hits: int = 0
    hit_rate: float = 0.0


@dataclass(frozen=True)
class Statistics:
    """Immutable snapshot of all samples at a point in time."""

    cached: CachedVariantStatistics
    uncached: VariantStatistics
    total_requests: int

    def for_variant(self, variant: Variant) -> VariantStatistics:
        """Return the summary for a variant."""
        if variant == CACHED:
            return self.cached
        if variant == UNCACHED:
            return self.uncached
        raise ValueError(f"Unknown variant: {variant!r}")


EMPTY_STATISTICS = Statistics(
    cached=CachedVariantStatistics(),
    uncached=VariantStatistics(),
    total_requests=0,
)


# ============================================================================
# Session Domain
# ============================================================================

SessionStateKind = Literal["idle", "running", "error"]


@dataclass(frozen=True)
class SessionState:
    """Controller state.

    variant is set only while running; message only in the error state.
    """

    kind: SessionStateKind
    variant: Variant | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> SessionState:
        return cls(kind="idle")

    @classmethod
    def running(cls, variant: Variant) -> SessionState:
        return cls(kind="running", variant=variant)

    @classmethod
    def error(cls, message: str) -> SessionState:
        return cls(kind="error", message=message)


@dataclass(frozen=True)
class SessionView:
    """What a display sink renders: recent samples plus statistics."""

    recent_samples: tuple[Sample, ...]
    statistics: Statistics


EMPTY_VIEW = SessionView(recent_samples=(), statistics=EMPTY_STATISTICS)
