"""HTTP sample source for a live origin server.

Talks to the origin's performance endpoints:
- GET  /api/performance/data/with-cache
- GET  /api/performance/data/without-cache
- POST /api/performance/cache/clear

Sample source boundary:
- Narrow interface `fetch_outcome(variant) -> Sample`
- Forbidden: store writes, statistics, UI shaping
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

import requests
from pydantic import ValidationError

from cachebench.core.errors import ServerFailure, TransportFailure
from cachebench.models.domain import CACHED, UNCACHED, Sample, Variant
from cachebench.models.types import OriginDataResponse, OriginErrorResponse
from cachebench.sources.base import SampleSourceBase

logger = logging.getLogger(__name__)

ENDPOINTS: dict[str, str] = {
    CACHED: "/api/performance/data/with-cache",
    UNCACHED: "/api/performance/data/without-cache",
}
CLEAR_CACHE_ENDPOINT = "/api/performance/cache/clear"

# The origin treats a cached-path response under this latency as a hit
DEFAULT_HIT_THRESHOLD_MS = 100.0

UNREACHABLE_MESSAGE = "Cannot reach the origin server. Check that the backend is running."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HttpSampleSource(SampleSourceBase):
    """Sample source backed by a requests session.

    Latency is the origin's reported responseTime when present, otherwise
    the client-measured round trip.
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        hit_threshold_ms: float = DEFAULT_HIT_THRESHOLD_MS,
        session: requests.Session | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize HTTP source.

        Args:
            base_url: Origin base URL, e.g. http://localhost:8080.
            timeout_s: Per-request timeout in seconds.
            hit_threshold_ms: Hit cutoff used when the origin omits cacheHit.
            session: Optional preconfigured session (tests inject one).
            clock: Source of capture timestamps.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.hit_threshold_ms = hit_threshold_ms
        self._clock = clock
        self._last_captured_at: datetime | None = None
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str) -> requests.Response:
        """Send a request, mapping failures to sample source errors."""
        url = f"{self.base_url}{path}"
        logger.debug(f"Origin request: {method} {url}")
        try:
            response = self._session.request(method, url, timeout=self.timeout_s)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.warning(f"Origin unreachable: {method} {url}: {e}")
            raise TransportFailure(UNREACHABLE_MESSAGE) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Origin request failed: {method} {url}: {e}")
            raise TransportFailure(f"Origin request failed: {e}") from e

        logger.debug(f"Origin response: {response.status_code} {url}")

        if not response.ok:
            raise ServerFailure(_error_message(response), status_code=response.status_code)
        return response

    def fetch_outcome(self, variant: Variant) -> Sample:
        """Fetch the dataset through one variant and time it.

        Args:
            variant: "cached" or "uncached".

        Returns:
            Sample for the outcome.
        """
        if variant not in ENDPOINTS:
            raise ValueError(f"Unknown variant: {variant!r}")

        start = time.perf_counter()
        response = self._request("GET", ENDPOINTS[variant])
        round_trip_ms = (time.perf_counter() - start) * 1000

        try:
            payload = OriginDataResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ServerFailure(
                f"Malformed origin response: {e}", status_code=response.status_code
            ) from e

        latency_ms = payload.response_time if payload.response_time is not None else round_trip_ms

        cache_hit: bool | None = None
        if variant == CACHED:
            if payload.cache_hit is not None:
                cache_hit = payload.cache_hit
            else:
                cache_hit = latency_ms < self.hit_threshold_ms

        return Sample(
            variant=variant,
            latency_ms=latency_ms,
            cache_hit=cache_hit,
            item_count=len(payload.data),
            captured_at=self._capture_time(),
        )

    def _capture_time(self) -> datetime:
        """Return a capture timestamp that never goes backwards.

        A wall clock stepped back (e.g. by NTP) is clamped to the last
        timestamp this source issued.
        """
        now = self._clock()
        if self._last_captured_at is not None and now < self._last_captured_at:
            logger.debug(f"Clock went back by {self._last_captured_at - now}; clamping")
            now = self._last_captured_at
        self._last_captured_at = now
        return now

    def clear_cache(self) -> None:
        """Ask the origin to clear every cache."""
        self._request("POST", CLEAR_CACHE_ENDPOINT)
        logger.info("Origin cache cleared")

    def close(self) -> None:
        """Close the underlying session if this source created it."""
        if self._owns_session:
            self._session.close()


def _error_message(response: requests.Response) -> str:
    """Extract a human-readable message from an origin error response."""
    try:
        body = OriginErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        body = OriginErrorResponse()

    if body.message:
        return body.message
    if body.error:
        return body.error
    return f"HTTP {response.status_code}: {response.reason}"
