"""Session controller.

Owns one session's sample store and statistics and drives them from a
sample source:
- run_test: source -> store -> statistics -> sinks
- clear_cache: delegated to the source, store untouched
- clear_results: store cleared, all-zero statistics published

Architecture:
- SessionController: state machine plus the single in-flight claim
- SampleStore / RunningStatistics: state owned by the controller
- DisplaySink: observers notified after each mutation
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from cachebench.aggregation.statistics import RunningStatistics
from cachebench.core.errors import BusyError, SampleSourceError
from cachebench.models.domain import (
    VARIANTS,
    Sample,
    SessionState,
    SessionView,
    Statistics,
    Variant,
)
from cachebench.session.sinks import DisplaySink
from cachebench.sources.base import SampleSourceBase
from cachebench.store.sample_store import SampleStore

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10


class SessionController:
    """Orchestrates test runs for a single session.

    At most one mutating operation is in flight at a time. The claim is a
    non-blocking lock acquisition, so concurrent callers (e.g. threaded
    request handlers) get BusyError instead of queueing or interleaving.
    While the source call is pending the store and the published view are
    untouched; current_view() keeps returning the previous snapshot.
    """

    def __init__(
        self,
        source: SampleSourceBase,
        sinks: list[DisplaySink] | None = None,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        """Initialize controller.

        Args:
            source: Sample source used for test runs and cache clears.
            sinks: Display sinks to register up front.
            recent_limit: Number of recent samples published per view.
        """
        self.source = source
        self.recent_limit = recent_limit
        self._store = SampleStore()
        self._statistics = RunningStatistics()
        self._sinks: list[DisplaySink] = list(sinks or [])
        self._in_flight = threading.Lock()
        self._state = SessionState.idle()
        self._view = SessionView(recent_samples=(), statistics=self._statistics.snapshot())
        self._last_error: str | None = None

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_sink(self, sink: DisplaySink) -> None:
        """Register a display sink."""
        if sink not in self._sinks:
            self._sinks.append(sink)

    def remove_sink(self, sink: DisplaySink) -> None:
        """Unregister a display sink. Unknown sinks are ignored."""
        if sink in self._sinks:
            self._sinks.remove(sink)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_error(self) -> str | None:
        """Message of the most recent failed operation, if any."""
        return self._last_error

    @property
    def store(self) -> SampleStore:
        return self._store

    @property
    def statistics(self) -> Statistics:
        return self._view.statistics

    def current_view(self) -> SessionView:
        """Return the last published view."""
        return self._view

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @contextmanager
    def _claim(self, operation: str) -> Iterator[None]:
        """Claim the session for one mutating operation.

        Raises:
            BusyError: If another operation is already in flight.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.info(f"Rejected {operation}: another operation is in flight")
            for sink in list(self._sinks):
                sink.on_busy()
            raise BusyError(f"Cannot {operation}: another operation is in flight")
        try:
            yield
        finally:
            self._in_flight.release()

    def run_test(self, variant: Variant) -> Sample | None:
        """Run one test against a variant and record the outcome.

        Args:
            variant: "cached" or "uncached".

        Returns:
            The recorded Sample, or None when the source failed (the failure
            message is passed to on_error and kept in last_error).

        Raises:
            BusyError: If another operation is in flight.
            InvalidSampleError: If the source produced a malformed sample.
        """
        if variant not in VARIANTS:
            raise ValueError(f"Unknown variant: {variant!r}")

        with self._claim("run test"):
            self._state = SessionState.running(variant)
            try:
                sample = self.source.fetch_outcome(variant)
                self._store.append(sample)
            except SampleSourceError as e:
                self._fail(e.message)
                return None
            finally:
                self._state = SessionState.idle()

            statistics = self._statistics.add(sample)
            self._last_error = None
            logger.info(
                f"Recorded {variant} sample: latency={sample.latency_ms:.1f}ms, "
                f"hit={sample.cache_hit}, items={sample.item_count}"
            )
            self._publish(statistics)
            return sample

    def clear_cache(self) -> bool:
        """Ask the source to clear the origin cache.

        The sample history and statistics are not touched.

        Returns:
            True on success, False when the source failed.

        Raises:
            BusyError: If another operation is in flight.
        """
        with self._claim("clear cache"):
            try:
                self.source.clear_cache()
            except SampleSourceError as e:
                self._fail(e.message)
                return False

            self._last_error = None
            logger.info("Origin cache cleared")
            return True

    def clear_results(self) -> SessionView:
        """Drop the sample history and publish the all-zero view.

        Raises:
            BusyError: If another operation is in flight.
        """
        with self._claim("clear results"):
            self._store.clear()
            statistics = self._statistics.reset()
            logger.info("Sample history cleared")
            return self._publish(statistics)

    def _fail(self, message: str) -> None:
        """Surface a source failure, then return to idle."""
        self._state = SessionState.error(message)
        self._last_error = message
        logger.warning(f"Sample source failed: {message}")
        for sink in list(self._sinks):
            sink.on_error(message)
        self._state = SessionState.idle()

    def _publish(self, statistics: Statistics) -> SessionView:
        """Replace the published view and notify every sink."""
        recent = tuple(self._store.recent(self.recent_limit))
        view = SessionView(recent_samples=recent, statistics=statistics)
        self._view = view
        for sink in list(self._sinks):
            sink.on_view_updated(view.recent_samples, view.statistics)
        return view

    def close(self) -> None:
        """Release the source's resources."""
        self.source.close()
