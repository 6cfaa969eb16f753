"""Display sinks for session views.

A sink receives the view after every store mutation and is told about
failures and busy rejections. Two bindings ship here:
- SnapshotSink: holds the latest view for a framework to serve (the API)
- LoggingSink: renders views as plain text through logging
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence

from cachebench.models.domain import (
    CACHED,
    EMPTY_VIEW,
    Sample,
    SessionView,
    Statistics,
)

logger = logging.getLogger(__name__)


class DisplaySink(ABC):
    """Abstract base class for display sinks."""

    @abstractmethod
    def on_view_updated(self, recent_samples: Sequence[Sample], statistics: Statistics) -> None:
        """Called after every store mutation with the latest view."""
        pass

    @abstractmethod
    def on_error(self, message: str) -> None:
        """Called when a test run or cache clear fails."""
        pass

    @abstractmethod
    def on_busy(self) -> None:
        """Called when a request is rejected because one is in flight."""
        pass


class SnapshotSink(DisplaySink):
    """Sink that keeps the most recent view for later reads.

    The view is replaced wholesale under a lock, so a reader on another
    thread sees either the previous or the new view.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._view = EMPTY_VIEW
        self._last_error: str | None = None
        self.busy_count = 0

    @property
    def view(self) -> SessionView:
        with self._lock:
            return self._view

    @property
    def last_error(self) -> str | None:
        with self._lock:
            return self._last_error

    def on_view_updated(self, recent_samples: Sequence[Sample], statistics: Statistics) -> None:
        view = SessionView(recent_samples=tuple(recent_samples), statistics=statistics)
        with self._lock:
            self._view = view
            self._last_error = None

    def on_error(self, message: str) -> None:
        with self._lock:
            self._last_error = message

    def on_busy(self) -> None:
        with self._lock:
            self.busy_count += 1


def format_sample(sample: Sample) -> str:
    """Render one sample as a single result line."""
    label = "cache on " if sample.variant == CACHED else "cache off"
    parts = [
        label,
        f"latency={sample.latency_ms:.0f}ms",
        f"items={sample.item_count}",
    ]
    if sample.variant == CACHED:
        parts.append("HIT" if sample.cache_hit else "MISS")
    parts.append(sample.captured_at.strftime("%H:%M:%S"))
    return "  ".join(parts)


def format_statistics(statistics: Statistics) -> str:
    """Render the statistics panel as a single line."""
    return (
        f"avg cached={statistics.cached.avg_latency_ms:.1f}ms  "
        f"avg uncached={statistics.uncached.avg_latency_ms:.1f}ms  "
        f"hit rate={statistics.cached.hit_rate:.1f}%  "
        f"total={statistics.total_requests}"
    )


class LoggingSink(DisplaySink):
    """Sink that writes views as plain text to a logger."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def on_view_updated(self, recent_samples: Sequence[Sample], statistics: Statistics) -> None:
        self.log.info(format_statistics(statistics))
        if not recent_samples:
            self.log.info("No test results.")
            return
        for sample in recent_samples:
            self.log.info(format_sample(sample))

    def on_error(self, message: str) -> None:
        self.log.error(f"Test failed: {message}")

    def on_busy(self) -> None:
        self.log.warning("A test is already running")
