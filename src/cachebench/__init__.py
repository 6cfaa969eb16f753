"""cachebench: cached vs uncached fetch latency comparison.

Collects timed fetch samples from a sample source and keeps per-variant
latency and cache hit-rate statistics for one session.
"""

__version__ = "0.1.0"
