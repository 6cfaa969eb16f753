"""Shared pytest fixtures for cachebench tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cachebench.core.errors import SampleSourceError
from cachebench.models.domain import CACHED, Sample
from cachebench.session.sinks import DisplaySink
from cachebench.sources.base import SampleSourceBase

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class SampleFactory:
    """Builds samples with strictly increasing capture times."""

    def __init__(self):
        self._tick = 0

    def __call__(
        self,
        variant: str = CACHED,
        latency_ms: float = 10.0,
        cache_hit: bool | None = None,
        item_count: int = 8,
        captured_at: datetime | None = None,
    ) -> Sample:
        if variant == CACHED and cache_hit is None:
            cache_hit = True
        if captured_at is None:
            captured_at = BASE_TIME + timedelta(seconds=self._tick)
            self._tick += 1
        return Sample(
            variant=variant,
            latency_ms=latency_ms,
            cache_hit=cache_hit,
            item_count=item_count,
            captured_at=captured_at,
        )


class ScriptedSource(SampleSourceBase):
    """Sample source that replays a script of samples and errors."""

    def __init__(self, make_sample: SampleFactory):
        self._make_sample = make_sample
        self.script: list[Sample | SampleSourceError] = []
        self.clear_errors: list[SampleSourceError] = []
        self.fetched: list[str] = []
        self.clear_calls = 0
        self.closed = False

    def fetch_outcome(self, variant):
        self.fetched.append(variant)
        if self.script:
            item = self.script.pop(0)
            if isinstance(item, SampleSourceError):
                raise item
            return item
        return self._make_sample(variant=variant)

    def clear_cache(self):
        self.clear_calls += 1
        if self.clear_errors:
            raise self.clear_errors.pop(0)

    def close(self):
        self.closed = True


class RecordingSink(DisplaySink):
    """Sink that records every notification."""

    def __init__(self):
        self.views: list[tuple[tuple[Sample, ...], object]] = []
        self.errors: list[str] = []
        self.busy = 0

    def on_view_updated(self, recent_samples, statistics):
        self.views.append((tuple(recent_samples), statistics))

    def on_error(self, message):
        self.errors.append(message)

    def on_busy(self):
        self.busy += 1


@pytest.fixture
def make_sample() -> SampleFactory:
    """Factory for well-formed samples."""
    return SampleFactory()


@pytest.fixture
def scripted_source(make_sample: SampleFactory) -> ScriptedSource:
    """Scripted sample source."""
    return ScriptedSource(make_sample)


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Sink that records notifications."""
    return RecordingSink()
