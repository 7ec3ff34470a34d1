"""Connection interface consumed by the core.

The core never talks HTTP itself. It resolves an endpoint, builds the form
parameters and hands them to a Connection, which carries the session and
returns raw bytes or raises TransportError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterator, Mapping, Protocol

from gxclient.core.endpoints import Endpoint, resolve
from gxclient.core.envelope import decode_json

FormParams = Mapping[str, str]
UploadFiles = Mapping[str, tuple[str, BinaryIO]]


@dataclass(frozen=True)
class TransportResponse:
    """Raw reply of a successful transport exchange."""

    status_code: int
    content: bytes


class Connection(Protocol):
    """Interface for authenticated requests against the platform."""

    def request(
        self,
        path: str,
        params: FormParams | None = None,
        *,
        method: str = "POST",
        files: UploadFiles | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send one request and return the complete reply."""
        ...

    def stream(
        self,
        path: str,
        params: FormParams | None = None,
        *,
        method: str = "POST",
    ) -> Iterator[bytes]:
        """Send one request and yield the reply body in chunks."""
        ...


def to_json_param(value: Any) -> str:
    """Serialize a parameter object the way the platform expects form fields."""
    if value is None:
        return "{}"
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def query(
    connection: Connection,
    endpoint: Endpoint,
    params: FormParams | None = None,
    *,
    files: UploadFiles | None = None,
) -> Any:
    """Resolve an endpoint, send the request and decode the JSON reply."""
    response = connection.request(resolve(endpoint), dict(params or {}), files=files)
    return decode_json(response.content)
