"""Application context management for the CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gxclient.cli.common.exits import die
from gxclient.core.auth import get_client
from gxclient.core.client import GxClient
from gxclient.core.errors import AuthError, TransportError


@dataclass
class AppContext:
    """Application context holding the profile and the configured client."""

    profile: str | None
    client: GxClient


def build_context(profile: str | None, *, verbose: bool = False) -> AppContext:
    """Build the application context, exiting on configuration or login errors.

    Args:
        profile: Optional profile name to load settings from.
        verbose: Force per-poll status output.

    Returns:
        AppContext: Application context with a connected client.
    """
    try:
        client = get_client(profile, verbose=verbose or None)
    except (AuthError, TransportError) as exc:
        die(str(exc), code=1)
    return AppContext(profile=profile, client=client)


def parse_params(raw: str | None) -> dict[str, Any]:
    """Parse a --params value: inline JSON object or @path to a JSON file."""
    if not raw:
        return {}
    text = raw
    if raw.startswith("@"):
        path = Path(raw[1:]).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"Cannot read parameters from {path}: {exc}") from exc
    try:
        params = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Parameters are not valid JSON: {exc}") from exc
    if not isinstance(params, dict):
        raise ValueError("Parameters must be a JSON object")
    return params
