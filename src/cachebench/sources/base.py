"""Base sample source interface.

Sample source: narrow interface `fetch_outcome(variant) -> Sample`
- Performs the timed request against the origin
- Forbidden: store writes, statistics, UI shaping
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cachebench.models.domain import Sample, Variant


class SampleSourceBase(ABC):
    """Abstract base class for sample sources.

    Sources implement a narrow interface: fetch_outcome(variant) -> sample

    Per boundary rules, sources must NOT:
    - Write to the sample store
    - Compute statistics
    - Shape UI output
    """

    @abstractmethod
    def fetch_outcome(self, variant: Variant) -> Sample:
        """Perform one timed request for a variant.

        Args:
            variant: "cached" or "uncached".

        Returns:
            Sample with measured latency, cache_hit set only for the cached
            variant, and item_count taken from the payload.

        Raises:
            TransportFailure: If the origin could not be reached.
            ServerFailure: If the origin answered with an error.
        """
        pass

    @abstractmethod
    def clear_cache(self) -> None:
        """Ask the origin to invalidate its cache.

        Raises:
            TransportFailure: If the origin could not be reached.
            ServerFailure: If the origin answered with an error.
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
