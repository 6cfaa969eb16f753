"""Mock sample source for demo/testing.

Simulates the origin in-process: a small fixed dataset behind a single
cache entry, slow origin reads and fast cache hits. Lets the session and the
API run without a live origin server.

Sample source boundary:
- Narrow interface `fetch_outcome(variant) -> Sample`
- Forbidden: store writes, statistics, UI shaping
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from datetime import datetime, timezone

from cachebench.core.errors import SampleSourceError
from cachebench.models.domain import CACHED, UNCACHED, Sample, Variant
from cachebench.sources.base import SampleSourceBase

logger = logging.getLogger(__name__)

# Origin read latency: 100 ms base plus up to 400 ms jitter
ORIGIN_BASE_LATENCY_MS = 100.0
ORIGIN_JITTER_MS = 400.0

# Cache hit latency range (ms)
CACHE_HIT_MIN_MS = 1.0
CACHE_HIT_MAX_MS = 15.0

DEMO_DATASET: tuple[dict, ...] = (
    {"name": "Product A", "description": "High-quality product A", "price": 100, "category": "Electronics"},
    {"name": "Product B", "description": "Premium product B", "price": 200, "category": "Electronics"},
    {"name": "Service X", "description": "Professional service X", "price": 150, "category": "Services"},
    {"name": "Service Y", "description": "Basic service Y", "price": 75, "category": "Services"},
    {"name": "Item 1", "description": "Standard item 1", "price": 50, "category": "General"},
    {"name": "Item 2", "description": "Standard item 2", "price": 60, "category": "General"},
    {"name": "Item 3", "description": "Standard item 3", "price": 70, "category": "General"},
    {"name": "Item 4", "description": "Standard item 4", "price": 80, "category": "General"},
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MockSampleSource(SampleSourceBase):
    """Mock source that simulates a cache in front of a slow origin.

    The cached variant misses on a cold cache, pays the origin latency and
    warms the cache; later cached fetches hit until clear_cache() is called.
    The uncached variant always pays the origin latency.

    Latencies come from a seeded random.Random, so a given seed yields the
    same sequence of outcomes.
    """

    def __init__(
        self,
        seed: int = 0,
        dataset: tuple[dict, ...] = DEMO_DATASET,
        simulate_delay: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize mock source.

        Args:
            seed: Seed for the latency generator.
            dataset: Items returned by every fetch.
            simulate_delay: Actually sleep for the simulated latency.
            clock: Source of capture timestamps.
        """
        self._rng = random.Random(seed)
        self._dataset = tuple(dataset)
        self._simulate_delay = simulate_delay
        self._clock = clock
        self._cache_warm = False
        self._pending_failures: list[SampleSourceError] = []
        self.fetch_count = 0
        self.clear_count = 0

    @property
    def cache_warm(self) -> bool:
        """Whether the next cached fetch will hit."""
        return self._cache_warm

    def fail_next(self, error: SampleSourceError) -> None:
        """Make the next fetch_outcome or clear_cache call raise error."""
        self._pending_failures.append(error)

    def _raise_pending_failure(self) -> None:
        if self._pending_failures:
            raise self._pending_failures.pop(0)

    def _origin_latency(self) -> float:
        return ORIGIN_BASE_LATENCY_MS + self._rng.random() * ORIGIN_JITTER_MS

    def _hit_latency(self) -> float:
        return self._rng.uniform(CACHE_HIT_MIN_MS, CACHE_HIT_MAX_MS)

    def fetch_outcome(self, variant: Variant) -> Sample:
        """Simulate one timed fetch.

        Args:
            variant: "cached" or "uncached".

        Returns:
            Sample for the simulated outcome.
        """
        if variant not in (CACHED, UNCACHED):
            raise ValueError(f"Unknown variant: {variant!r}")

        self._raise_pending_failure()
        self.fetch_count += 1

        cache_hit: bool | None = None
        if variant == CACHED:
            cache_hit = self._cache_warm
            latency_ms = self._hit_latency() if cache_hit else self._origin_latency()
            self._cache_warm = True
        else:
            latency_ms = self._origin_latency()

        if self._simulate_delay:
            time.sleep(latency_ms / 1000)

        logger.debug(f"Mock fetch: variant={variant}, latency={latency_ms:.1f}ms, hit={cache_hit}")

        return Sample(
            variant=variant,
            latency_ms=latency_ms,
            cache_hit=cache_hit,
            item_count=len(self._dataset),
            captured_at=self._clock(),
        )

    def clear_cache(self) -> None:
        """Invalidate the simulated cache."""
        self._raise_pending_failure()
        self.clear_count += 1
        self._cache_warm = False
        logger.debug("Mock cache cleared")
