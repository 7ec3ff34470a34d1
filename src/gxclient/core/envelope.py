"""Classification of platform responses.

The platform answers every request with a JSON object whose shape depends
on the outcome, and it reports most failures in-band over a successful HTTP
reply. `classify` turns such an object into exactly one of three variants
so downstream code can match on the result instead of probing fields:

- DataResult: the payload expected for the operation.
- JobHandleResult: a submission acknowledgment carrying a job id.
- Advisory: a denial, validation failure or other platform message.

Precedence is strict: a recognizable payload wins over a job id, and a job
id wins over heuristic error detection. Nothing here raises on malformed
input.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from gxclient.core.errors import TransportError
from gxclient.core.jobs import JobStatus

RESPONSE_OK = 0

DEFAULT_JOB_ID_KEYS = ("jobID", "jobId")
_ERROR_KEYS = ("error", "errorMessage")
_STATUS_KEYS = ("status",)
_PERCENT_KEYS = ("percent",)


@dataclass(frozen=True)
class DataResult:
    """Response carrying the payload expected for the operation."""

    payload: Any


@dataclass(frozen=True)
class JobHandleResult:
    """Submission acknowledgment for an asynchronous job."""

    job_id: str
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class Advisory:
    """Platform-level failure or notice delivered as a normal response."""

    payload: Any
    message: str


Envelope = Union[DataResult, JobHandleResult, Advisory]


def decode_json(content: bytes) -> Any:
    """Decode a response body, treating undecodable bodies as protocol failures."""
    if not content:
        return {}
    try:
        return json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise TransportError(f"Platform returned a non-JSON response: {exc}") from exc


def _job_id(response: Mapping[str, Any], keys: Iterable[str]) -> str | None:
    for key in keys:
        value = response.get(key)
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (str, int)) and str(value).strip():
            return str(value).strip()
    return None


def advisory_message(response: Any) -> str | None:
    """
    Return the advisory text of a response, or None if it looks successful.

    A response is an advisory when its `type` field is present and differs
    from the OK code, when it carries an explicit error field, or when its
    only content is a message.
    """
    if not isinstance(response, Mapping):
        return f"Unexpected response of type {type(response).__name__}"

    for key in _ERROR_KEYS:
        value = response.get(key)
        if value:
            return str(value)

    message = response.get("message")
    kind = response.get("type")
    if kind is not None and kind != RESPONSE_OK:
        return str(message) if message else f"Platform response type {kind!r}"

    if message and set(response) <= {"message", "type"}:
        return str(message)
    return None


def classify(
    response: Any,
    *,
    payload_keys: Iterable[str] = (),
    job_id_keys: Iterable[str] = DEFAULT_JOB_ID_KEYS,
) -> Envelope:
    """
    Classify a decoded platform response.

    Args:
        response: Decoded JSON object as returned by the platform.
        payload_keys: Fields whose presence marks the expected payload.
        job_id_keys: Fields that may carry a job identifier.

    Returns:
        DataResult, JobHandleResult or Advisory.
    """
    if not isinstance(response, Mapping):
        return Advisory(payload=response, message=advisory_message(response) or "")

    if any(key in response for key in payload_keys):
        return DataResult(payload=response)

    job_id = _job_id(response, job_id_keys)
    if job_id is not None:
        return JobHandleResult(job_id=job_id, payload=response)

    message = advisory_message(response)
    if message is not None:
        return Advisory(payload=response, message=message)

    return DataResult(payload=response)


def extract_status(response: Any) -> tuple[JobStatus | None, object]:
    """
    Read the job status of a job-control response.

    Returns:
        (status, raw) where status is None if the value is missing or not a
        known code, and raw is the value exactly as found.
    """
    if not isinstance(response, Mapping):
        return None, None
    raw: object = None
    for key in _STATUS_KEYS:
        if key in response:
            raw = response[key]
            break
    value = raw
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    return JobStatus.from_value(value), raw


def extract_percent(response: Any) -> int | None:
    """Return the reported completion percentage, if any."""
    if not isinstance(response, Mapping):
        return None
    for key in _PERCENT_KEYS:
        value = response.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return int(value)
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
    return None
