"""Error taxonomy for the platform client.

Only failures the caller cannot reasonably inspect as data are raised.
Platform advisories (denials, validation failures, missing elements) come
back as ordinary response objects and never appear here.
"""


class GxError(RuntimeError):
    """Base class for all client errors."""


class TransportError(GxError):
    """Raised when the connection fails (network, protocol, HTTP status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(GxError):
    """Raised when a connection cannot be configured or logged in."""


class InternalError(GxError, ValueError):
    """Raised for programming errors such as unknown endpoints or bad flags."""


class PollingError(GxError):
    """Base class for errors that stop a job poll loop."""

    def __init__(self, message: str, job_id: str):
        super().__init__(message)
        self.job_id = job_id


class JobStatusError(PollingError):
    """Raised when job-control keeps returning an unrecognized status."""


class PollTimeoutError(PollingError):
    """Raised when a job does not reach a terminal state in time."""


class PollCancelledError(PollingError):
    """Raised when polling is cancelled between two poll attempts."""
