"""Analysis and workflow invocation, plus job completion tracking.

An invocation submits a tool or workflow run, extracts the job id from the
acknowledgment and, when asked to wait, polls job-control until the job
reaches a terminal state. The poll loop is synchronous and blocks the
calling thread between attempts; it keeps no state outside the call, so
independent invocations can run concurrently from different threads.

Terminal states are results, not failures: a job TERMINATED_BY_ERROR is
returned like a COMPLETED one. Only transport failures, an exhausted
budget of unrecognized statuses, a timeout or a cancellation stop the
loop with an exception.
"""

from __future__ import annotations

import time
import uuid
from threading import Event
from typing import Any, Callable, Mapping

from gxclient.core.connection import Connection, query, to_json_param
from gxclient.core.endpoints import Endpoint
from gxclient.core.envelope import (
    DataResult,
    Envelope,
    JobHandleResult,
    classify,
    extract_percent,
    extract_status,
)
from gxclient.core.errors import (
    InternalError,
    JobStatusError,
    PollCancelledError,
    PollTimeoutError,
)
from gxclient.core.jobs import JobProgress, ProgressReporter, is_terminal

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_UNKNOWN_POLLS = 30


def new_job_id(prefix: str = "JOB") -> str:
    """Generate a job id; the platform addresses jobs by the id the client sends."""
    return f"{prefix}{uuid.uuid4().hex[:16].upper()}"


def submit(
    connection: Connection,
    name: str,
    params: Mapping[str, Any] | None = None,
    *,
    is_workflow: bool = False,
    job_id: str | None = None,
) -> tuple[str, Envelope]:
    """
    Submit an analysis tool or workflow run.

    Args:
        connection: Connection used for the request.
        name: Tool name, or the workflow's path in the workspace.
        params: Parameter object passed to the tool or workflow.
        is_workflow: Submit to the workflow endpoint instead of analysis.
        job_id: Id to submit under; generated if omitted.

    Returns:
        (job_id, envelope). A job id echoed by the platform replaces the
        submitted one.
    """
    if not name or not name.strip():
        raise InternalError("An analysis or workflow name is required")

    job_id = job_id or new_job_id()
    form = {"de": name, "jobID": job_id, "json": to_json_param(params)}
    if is_workflow:
        form["action"] = "start_workflow"
        endpoint = Endpoint.WORKFLOW
    else:
        endpoint = Endpoint.ANALYZE

    envelope = classify(query(connection, endpoint, form))
    if isinstance(envelope, JobHandleResult):
        job_id = envelope.job_id
    elif isinstance(envelope, DataResult):
        # plain acknowledgment: the job runs under the submitted id
        envelope = JobHandleResult(job_id=job_id, payload=envelope.payload)
    return job_id, envelope


def get_job_status(connection: Connection, job_id: str) -> Any:
    """Return the raw job-control response for a job."""
    return query(connection, Endpoint.JOB_CONTROL, {"jobID": job_id})


def wait_for_job(
    connection: Connection,
    job_id: str,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float | None = None,
    max_unknown_polls: int | None = DEFAULT_MAX_UNKNOWN_POLLS,
    cancel_event: Event | None = None,
    reporter: ProgressReporter | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Any:
    """
    Block until a job reaches a terminal state.

    This function polls job-control at a fixed interval. Each observation is
    passed to the reporter (if any) before the decision to stop or continue.

    Args:
        connection: Connection used for job-control requests.
        job_id: Identifier of the job to monitor.
        poll_interval: Seconds to wait between status checks.
        timeout: Maximum seconds to wait in total, or None for no limit.
        max_unknown_polls: Consecutive unrecognized statuses tolerated
            before giving up, or None for no limit.
        cancel_event: Checked between attempts; when set, polling stops.
        reporter: Callable receiving a JobProgress per attempt.
        sleep: Sleep function (injectable for tests).
        clock: Monotonic clock (injectable for tests).

    Returns:
        The job-control response carrying the terminal status.

    Raises:
        JobStatusError: Too many consecutive unrecognized statuses.
        PollTimeoutError: The timeout elapsed first.
        PollCancelledError: The cancel event was set.
        TransportError: A job-control request failed.
    """
    if poll_interval < 0:
        raise InternalError("poll_interval must be >= 0")
    if max_unknown_polls is not None and max_unknown_polls < 1:
        raise InternalError("max_unknown_polls must be >= 1")

    deadline = clock() + timeout if timeout is not None else None
    attempt = 0
    unknown_in_a_row = 0

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise PollCancelledError(f"Polling of job {job_id} was cancelled", job_id)

        attempt += 1
        response = get_job_status(connection, job_id)
        status, raw_status = extract_status(response)

        if reporter is not None:
            reporter(
                JobProgress(
                    job_id=job_id,
                    status=status,
                    raw_status=raw_status,
                    percent=extract_percent(response),
                    attempt=attempt,
                    response=response if isinstance(response, Mapping) else {},
                )
            )

        if is_terminal(status):
            return response

        if status is None:
            unknown_in_a_row += 1
            if max_unknown_polls is not None and unknown_in_a_row >= max_unknown_polls:
                raise JobStatusError(
                    f"Job {job_id} reported an unrecognized status "
                    f"{unknown_in_a_row} times in a row (last: {raw_status!r})",
                    job_id,
                )
        else:
            unknown_in_a_row = 0

        if deadline is not None and clock() + poll_interval > deadline:
            raise PollTimeoutError(
                f"Job {job_id} did not finish within {timeout} seconds", job_id
            )

        if cancel_event is not None:
            if cancel_event.wait(poll_interval):
                raise PollCancelledError(f"Polling of job {job_id} was cancelled", job_id)
        else:
            sleep(poll_interval)


def invoke(
    connection: Connection,
    name: str,
    params: Mapping[str, Any] | None = None,
    *,
    is_workflow: bool = False,
    wait: bool = True,
    progress: bool = False,
    reporter: ProgressReporter | None = None,
    **poll_options: Any,
) -> Any:
    """
    Run the complete submit-and-track sequence for one tool or workflow.

    With wait=False the submission response, completed with the `jobID`
    it runs under, is returned right away and no job-control request is
    made. Advisory submission replies are returned as-is without polling.

    Raises:
        InternalError: progress was requested without waiting, or the name
            is empty.
    """
    if progress and not wait:
        raise InternalError("progress=True requires wait=True")

    job_id, envelope = submit(connection, name, params, is_workflow=is_workflow)
    if not isinstance(envelope, JobHandleResult):
        return envelope.payload
    if not wait:
        return {**envelope.payload, "jobID": job_id}

    return wait_for_job(
        connection,
        job_id,
        reporter=reporter if progress else None,
        **poll_options,
    )
