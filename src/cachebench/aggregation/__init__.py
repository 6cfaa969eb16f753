"""Aggregation module for sample statistics.

- Reads the sample history and produces statistics snapshots
- Forbidden: store mutation, sample source calls
"""

from cachebench.aggregation.statistics import RunningStatistics, compute_statistics

__all__ = ["RunningStatistics", "compute_statistics"]
