"""Session module: controller and display sinks.

- Owns the sample store and statistics for one session
- Forbidden: HTTP handling, rendering beyond plain-text sinks
"""

from cachebench.session.controller import SessionController
from cachebench.session.sinks import DisplaySink, LoggingSink, SnapshotSink

__all__ = [
    "DisplaySink",
    "LoggingSink",
    "SessionController",
    "SnapshotSink",
]
