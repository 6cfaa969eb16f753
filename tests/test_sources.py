"""Tests for sample sources."""

from datetime import datetime, timezone

import pytest

from cachebench.core.errors import ServerFailure, TransportFailure
from cachebench.models.domain import CACHED, UNCACHED, Sample
from cachebench.sources.base import SampleSourceBase
from cachebench.sources.http import HttpSampleSource
from cachebench.sources.mock import (
    CACHE_HIT_MAX_MS,
    DEMO_DATASET,
    ORIGIN_BASE_LATENCY_MS,
    MockSampleSource,
)
from cachebench.store.sample_store import validate_sample


class TestSampleSourceBase:
    """Test base source interface."""

    def test_is_abstract(self):
        """SampleSourceBase cannot be instantiated directly."""
        with pytest.raises(TypeError):
            SampleSourceBase()

    def test_sources_inherit_from_base(self):
        """Shipped sources implement the base interface."""
        assert issubclass(MockSampleSource, SampleSourceBase)
        assert issubclass(HttpSampleSource, SampleSourceBase)


class TestMockSampleSource:
    """Test the simulated origin."""

    def test_first_cached_fetch_misses(self):
        """A cold cache misses and pays origin latency."""
        source = MockSampleSource(seed=1)

        sample = source.fetch_outcome(CACHED)

        assert sample.cache_hit is False
        assert sample.latency_ms >= ORIGIN_BASE_LATENCY_MS
        assert source.cache_warm

    def test_second_cached_fetch_hits(self):
        """A warm cache hits with low latency."""
        source = MockSampleSource(seed=1)
        source.fetch_outcome(CACHED)

        sample = source.fetch_outcome(CACHED)

        assert sample.cache_hit is True
        assert sample.latency_ms <= CACHE_HIT_MAX_MS

    def test_uncached_never_sets_cache_hit(self):
        """Uncached samples carry no cache_hit and do not warm the cache."""
        source = MockSampleSource(seed=1)

        sample = source.fetch_outcome(UNCACHED)

        assert sample.cache_hit is None
        assert sample.latency_ms >= ORIGIN_BASE_LATENCY_MS
        assert not source.cache_warm

    def test_clear_cache_makes_next_fetch_miss(self):
        """clear_cache resets the warm flag."""
        source = MockSampleSource(seed=1)
        source.fetch_outcome(CACHED)

        source.clear_cache()

        assert source.fetch_outcome(CACHED).cache_hit is False
        assert source.clear_count == 1

    def test_item_count_is_dataset_size(self):
        """item_count reflects the returned dataset."""
        assert MockSampleSource().fetch_outcome(UNCACHED).item_count == len(DEMO_DATASET)
        assert MockSampleSource(dataset=({"a": 1},)).fetch_outcome(CACHED).item_count == 1

    def test_same_seed_same_latencies(self):
        """Latencies are deterministic for a seed."""
        a = MockSampleSource(seed=5)
        b = MockSampleSource(seed=5)

        for variant in (CACHED, UNCACHED, CACHED):
            assert a.fetch_outcome(variant).latency_ms == b.fetch_outcome(variant).latency_ms

    def test_uses_clock(self):
        """captured_at comes from the injected clock."""
        stamp = datetime(2026, 3, 1, tzinfo=timezone.utc)
        source = MockSampleSource(clock=lambda: stamp)

        assert source.fetch_outcome(CACHED).captured_at == stamp

    def test_samples_are_valid(self):
        """Every produced sample passes store validation."""
        source = MockSampleSource(seed=2)
        previous = None
        for variant in (CACHED, UNCACHED, CACHED, CACHED, UNCACHED):
            sample = source.fetch_outcome(variant)
            validate_sample(sample, previous)
            previous = sample

    def test_fail_next_raises_once(self):
        """Injected failures are raised once, in order."""
        source = MockSampleSource()
        source.fail_next(ServerFailure("500"))

        with pytest.raises(ServerFailure):
            source.fetch_outcome(CACHED)
        assert isinstance(source.fetch_outcome(CACHED), Sample)
        assert source.fetch_count == 1

    def test_fail_next_applies_to_clear_cache(self):
        """Injected failures also apply to clear_cache."""
        source = MockSampleSource()
        source.fetch_outcome(CACHED)
        source.fail_next(TransportFailure("down"))

        with pytest.raises(TransportFailure):
            source.clear_cache()
        assert source.cache_warm

    def test_unknown_variant(self):
        """Unknown variants raise ValueError."""
        with pytest.raises(ValueError):
            MockSampleSource().fetch_outcome("warm")
