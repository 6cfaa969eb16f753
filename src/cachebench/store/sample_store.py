"""Append-only sample history.

The store owns ordering and validation only. It never talks to the network
and never renders anything; statistics are derived elsewhere.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence

from cachebench.core.errors import InvalidSampleError
from cachebench.models.domain import CACHED, VARIANTS, Sample


class SampleHistoryView(Sequence):
    """Read-only, restartable view over a slice of the history.

    The view pins the backing list and the [start, stop) bounds at creation
    time, so later appends or a clear() on the store never change what it
    yields.
    """

    def __init__(self, samples: list[Sample], start: int, stop: int, newest_first: bool = False):
        self._samples = samples
        self._start = start
        self._stop = stop
        self._length = stop - start
        self._newest_first = newest_first

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self[i] for i in range(*index.indices(self._length)))
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("sample index out of range")
        if self._newest_first:
            return self._samples[self._stop - 1 - index]
        return self._samples[self._start + index]

    def __iter__(self) -> Iterator[Sample]:
        for i in range(self._length):
            yield self[i]

    def __repr__(self) -> str:
        order = "newest_first" if self._newest_first else "oldest_first"
        return f"SampleHistoryView({self._length} samples, {order})"


def validate_sample(sample: Sample, previous: Sample | None = None) -> None:
    """Check a sample against the store invariants.

    Args:
        sample: Sample to validate.
        previous: Last sample currently in the store, if any.

    Raises:
        InvalidSampleError: If the sample is malformed.
    """
    if sample.variant not in VARIANTS:
        raise InvalidSampleError(f"Unknown variant: {sample.variant!r}")

    if sample.variant == CACHED and not isinstance(sample.cache_hit, bool):
        raise InvalidSampleError(
            f"cached sample must carry a bool cache_hit, got {sample.cache_hit!r}"
        )
    if sample.variant != CACHED and sample.cache_hit is not None:
        raise InvalidSampleError(f"{sample.variant} sample must not carry cache_hit")

    if not math.isfinite(sample.latency_ms):
        raise InvalidSampleError(f"latency_ms={sample.latency_ms} is not finite")
    if sample.latency_ms < 0:
        raise InvalidSampleError(f"latency_ms={sample.latency_ms} < 0")
    if sample.item_count < 0:
        raise InvalidSampleError(f"item_count={sample.item_count} < 0")

    if sample.captured_at.tzinfo is None:
        raise InvalidSampleError("captured_at must be timezone-aware")
    if previous is not None and sample.captured_at < previous.captured_at:
        raise InvalidSampleError(
            f"captured_at={sample.captured_at.isoformat()} is earlier than "
            f"last sample {previous.captured_at.isoformat()}"
        )


class SampleStore:
    """Ordered sample history for one session."""

    def __init__(self):
        self._samples: list[Sample] = []

    def __len__(self) -> int:
        return len(self._samples)

    def append(self, sample: Sample) -> None:
        """Add a sample to the end of the history.

        Raises:
            InvalidSampleError: If the sample violates the store invariants.
        """
        previous = self._samples[-1] if self._samples else None
        validate_sample(sample, previous)
        self._samples.append(sample)

    def clear(self) -> None:
        """Drop the whole history. Idempotent."""
        # Rebind rather than empty in place so outstanding views stay valid
        self._samples = []

    def recent(self, n: int) -> SampleHistoryView:
        """Return the last n samples, most recent first."""
        total = len(self._samples)
        length = max(0, min(n, total))
        return SampleHistoryView(self._samples, total - length, total, newest_first=True)

    def all(self) -> SampleHistoryView:
        """Return the full history in insertion order."""
        return SampleHistoryView(self._samples, 0, len(self._samples))
