#!/usr/bin/env python3
"""Demo session against the simulated origin.

Runs a short sequence of cached and uncached tests through a
SessionController backed by MockSampleSource and logs every view.

Usage:
    python scripts/demo_session.py

Exit codes:
    0: Session finished and statistics are consistent
    1: Statistics check failed
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from cachebench.aggregation import compute_statistics  # noqa: E402
from cachebench.config import configure_logging  # noqa: E402
from cachebench.models.domain import CACHED, UNCACHED  # noqa: E402
from cachebench.session import LoggingSink, SessionController  # noqa: E402
from cachebench.sources import MockSampleSource  # noqa: E402

# Constants
DEMO_SEED = 7
DEMO_ROUNDS = 3


def run_session(controller: SessionController) -> None:
    """Run the demo sequence of tests."""
    for i in range(DEMO_ROUNDS):
        print(f"\n[{i + 1}/{DEMO_ROUNDS}] uncached, cached, cached...")
        controller.run_test(UNCACHED)
        controller.run_test(CACHED)
        controller.run_test(CACHED)

    print("\nClearing origin cache, then one more cached test...")
    controller.clear_cache()
    controller.run_test(CACHED)


def check_statistics(controller: SessionController) -> bool:
    """Check the published statistics against a full recomputation."""
    statistics = controller.statistics
    recomputed = compute_statistics(controller.store)

    if statistics != recomputed:
        print("FAIL: Running statistics differ from full recomputation")
        return False

    print(f"OK: {statistics.total_requests} requests recorded")
    print(f"    Cached avg:   {statistics.cached.avg_latency_ms:.1f} ms")
    print(f"    Uncached avg: {statistics.uncached.avg_latency_ms:.1f} ms")
    print(f"    Hit rate:     {statistics.cached.hit_rate:.1f}%")
    return True


def main() -> int:
    """Main entry point."""
    configure_logging(logging.INFO)

    print("=" * 60)
    print("cachebench Demo Session")
    print("=" * 60)

    controller = SessionController(
        MockSampleSource(seed=DEMO_SEED),
        sinks=[LoggingSink()],
    )
    try:
        run_session(controller)
        ok = check_statistics(controller)
    finally:
        controller.close()

    print("=" * 60)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
