"""Core job domain models.

This module defines the job lifecycle states reported by the platform's
job-control service together with the small value objects that travel
through a submission and its poll loop (JobHandle, JobProgress). It is
intentionally free of transport and CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Mapping


class JobStatus(IntEnum):
    """
    Lifecycle states of a platform job, with their wire encoding.

    Values:
        CREATED: The job is registered but has not started.
        RUNNING: The job is executing.
        PAUSED: The job is suspended and may resume.
        COMPLETED: The job finished successfully.
        TERMINATED_BY_REQUEST: The job was stopped by a user.
        TERMINATED_BY_ERROR: The job failed.
    """

    CREATED = 1
    RUNNING = 2
    PAUSED = 3
    COMPLETED = 4
    TERMINATED_BY_REQUEST = 5
    TERMINATED_BY_ERROR = 6

    @classmethod
    def from_value(cls, value: object) -> JobStatus | None:
        """
        Map a wire value to a status.

        Returns None for anything that is not one of the six known integer
        codes (including booleans), never a default state.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        """True if no further transition can follow this state."""
        return self in _TERMINAL


_TERMINAL = frozenset(
    {
        JobStatus.COMPLETED,
        JobStatus.TERMINATED_BY_REQUEST,
        JobStatus.TERMINATED_BY_ERROR,
    }
)


def is_terminal(status: JobStatus | None) -> bool:
    """Return True for terminal states; an unrecognized status is never terminal."""
    return status is not None and status.is_terminal


@dataclass(frozen=True)
class JobHandle:
    """
    Identifies a submitted job for the duration of one invocation.

    Attributes:
        job_id: Opaque identifier used for job-control requests.
        response: The submission acknowledgment as returned by the platform.
    """

    job_id: str
    response: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class JobProgress:
    """
    A single job-control observation made while waiting for a job.

    Attributes:
        job_id: Job being polled.
        status: Interpreted status, or None if the value was not recognized.
        raw_status: Status value exactly as found in the response.
        percent: Completion percentage if the platform reported one.
        attempt: 1-based poll attempt number.
        response: The job-control response for this attempt.
    """

    job_id: str
    status: JobStatus | None
    raw_status: object
    percent: int | None
    attempt: int
    response: Mapping[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Human-readable status name."""
        if self.status is None:
            return f"UNKNOWN({self.raw_status!r})"
        return self.status.name


ProgressReporter = Callable[[JobProgress], None]
