from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from gxclient.core.connection import TransportResponse  # noqa: E402


class StubConnection:
    """
    Scripted connection.

    `responses` maps a request path to a list of replies served in order;
    the last reply repeats. A reply is a JSON-able object, raw bytes, or an
    exception instance to raise.
    """

    def __init__(self, responses=None, chunks=None):
        self.responses = {path: list(items) for path, items in (responses or {}).items()}
        self.chunks = list(chunks or [])
        self.calls: list[tuple[str, dict, object]] = []

    def request(self, path, params=None, *, method="POST", files=None, headers=None):
        self.calls.append((path, dict(params or {}), files))
        queue = self.responses.get(path)
        if not queue:
            raise AssertionError(f"unexpected request to {path}")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        body = item if isinstance(item, bytes) else json.dumps(item).encode()
        return TransportResponse(status_code=200, content=body)

    def stream(self, path, params=None, *, method="POST"):
        self.calls.append((path, dict(params or {}), None))
        yield from self.chunks

    def paths(self) -> list[str]:
        return [path for path, _, _ in self.calls]

    def count(self, path: str) -> int:
        return sum(1 for p in self.paths() if p == path)


@pytest.fixture
def make_connection():
    return StubConnection


@pytest.fixture
def no_sleep():
    slept: list[float] = []
    return slept, slept.append
