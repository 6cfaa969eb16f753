"""Error types for cachebench.

Local errors (InvalidSampleError, BusyError) are raised straight to the
caller. Sample source errors (TransportFailure, ServerFailure) are caught by
the session controller and surfaced to display sinks.
"""


class CacheBenchError(Exception):
    """Base class for all cachebench errors."""


class InvalidSampleError(CacheBenchError, ValueError):
    """A sample violates the store's invariants."""


class BusyError(CacheBenchError):
    """A mutating session operation was requested while another is in flight."""


class SampleSourceError(CacheBenchError):
    """A sample source could not produce an outcome.

    Attributes:
        message: Human-readable failure description.
        connectivity: True when the origin could not be reached at all,
            False when it answered with an error.
    """

    connectivity = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportFailure(SampleSourceError):
    """The origin could not be reached."""

    connectivity = True


class ServerFailure(SampleSourceError):
    """The origin was reachable but reported an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
