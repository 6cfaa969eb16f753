"""Sample sources.

Structure:
- sources/base.py - SampleSourceBase interface
- sources/http.py - live origin over HTTP (requests)
- sources/mock.py - in-process simulated origin
"""

from cachebench.sources.base import SampleSourceBase
from cachebench.sources.http import HttpSampleSource
from cachebench.sources.mock import MockSampleSource

__all__ = [
    "HttpSampleSource",
    "MockSampleSource",
    "SampleSourceBase",
]
