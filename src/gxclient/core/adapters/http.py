from __future__ import annotations

from typing import Iterator, Mapping

import httpx

from gxclient.core.connection import FormParams, TransportResponse, UploadFiles
from gxclient.core.envelope import advisory_message, decode_json
from gxclient.core.errors import AuthError, TransportError

LOGIN_PATH = "/support/login"


class HttpConnection:
    """Connection to the platform over httpx, holding the session cookie."""

    _CHUNK_SIZE = 8192

    def __init__(
        self,
        server: str,
        *,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a connection for a platform base URL such as https://host/biouml."""
        if not server:
            raise AuthError("A server URL is required.")
        self.server = _sanitize_server(server)
        self._client = client or httpx.Client(
            base_url=self.server,
            timeout=timeout,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpConnection:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def login(self, user: str, password: str) -> None:
        """Open an authenticated session; the session cookie is kept by httpx."""
        try:
            response = self.request(LOGIN_PATH, {"username": user, "password": password})
            reply = decode_json(response.content)
        except TransportError as exc:
            raise AuthError(f"Login to {self.server} failed: {exc}") from exc
        message = advisory_message(reply)
        if message is not None:
            raise AuthError(f"Login to {self.server} failed: {message}")

    def request(
        self,
        path: str,
        params: FormParams | None = None,
        *,
        method: str = "POST",
        files: UploadFiles | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send a form request and return the full reply body."""
        try:
            response = self._client.request(
                method,
                path,
                data=dict(params or {}),
                files=dict(files) if files else None,
                headers=dict(headers or {}),
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        _raise_for_status(response, method, path)
        return TransportResponse(status_code=response.status_code, content=response.content)

    def stream(
        self,
        path: str,
        params: FormParams | None = None,
        *,
        method: str = "POST",
    ) -> Iterator[bytes]:
        """Send a form request and yield the reply body as it arrives."""
        try:
            with self._client.stream(method, path, data=dict(params or {})) as response:
                if response.status_code >= 400:
                    response.read()
                    _raise_for_status(response, method, path)
                yield from response.iter_bytes(chunk_size=self._CHUNK_SIZE)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc


def _sanitize_server(server: str) -> str:
    """Strip query strings and trailing slashes from a server URL."""
    server = server.split("?", 1)[0]
    return server.rstrip("/")


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    if response.status_code < 400:
        return
    detail = response.text.strip()[:200] if response.content else ""
    message = f"{method} {path} returned HTTP {response.status_code}"
    if detail:
        message = f"{message}: {detail}"
    raise TransportError(message, status_code=response.status_code)
