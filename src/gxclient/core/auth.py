"""Connection and client construction from settings.

This module centralizes creation of an authenticated HttpConnection and the
GxClient on top of it, turning configuration and login problems into a
single AuthError with a readable message.
"""

from __future__ import annotations

from gxclient.core.adapters.http import HttpConnection
from gxclient.core.client import GxClient
from gxclient.core.config import GxSettings, load_settings
from gxclient.core.errors import AuthError


def _format_config_error(errors: list[str], profile: str | None) -> str:
    """Return a user-friendly configuration error message."""
    where = f"profile '{profile}'" if profile else "the default profile"
    lines = "\n".join(f"  - {e}" for e in errors)
    return f"Invalid configuration for {where}:\n{lines}"


def get_connection(settings: GxSettings) -> HttpConnection:
    """
    Create an HttpConnection and log in when credentials are configured.

    Anonymous access is used when no user is set.
    """
    connection = HttpConnection(settings.server, timeout=settings.request_timeout)
    if settings.user:
        try:
            connection.login(settings.user, settings.password)
        except AuthError:
            connection.close()
            raise
    return connection


def get_client(profile: str | None = None, *, verbose: bool | None = None) -> GxClient:
    """
    Create and return a configured GxClient.

    Settings are resolved from the profile file and environment (see
    gxclient.core.config). `verbose` overrides the configured value.
    """
    settings = load_settings(profile)
    errors = settings.validate()
    if errors:
        raise AuthError(_format_config_error(errors, profile))
    connection = get_connection(settings)
    return GxClient(
        connection,
        verbose=settings.verbose if verbose is None else verbose,
        poll_interval=settings.poll_interval,
        timeout=settings.timeout,
    )
