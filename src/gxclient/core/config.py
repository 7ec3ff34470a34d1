"""Client settings loaded from a profile file and the environment.

Profiles live in an INI file (default `~/.gxclientcfg`), one section per
profile with `[DEFAULT]` as fallback. Environment variables override the
selected profile. Invalid numeric values fall back to the defaults.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_ENV = "GXCLIENT_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path.home() / ".gxclientcfg"

_ENV_PREFIX = "GXCLIENT_"
_TRUE = {"1", "true", "yes", "on"}


@dataclass
class GxSettings:
    """Connection and polling settings for one profile."""

    server: str = ""
    user: str = ""
    password: str = ""
    poll_interval: float = 1.0
    timeout: float | None = None
    request_timeout: float = 60.0
    verbose: bool = False

    def validate(self) -> list[str]:
        """Return a list of human-readable configuration problems."""
        errors: list[str] = []
        if not self.server:
            errors.append(
                f"Server URL not configured. Set {_ENV_PREFIX}SERVER or add "
                "`server` to your profile."
            )
        if self.user and not self.password:
            errors.append(f"Password missing for user {self.user!r}.")
        return errors


def config_path() -> Path:
    raw = os.getenv(CONFIG_FILE_ENV)
    return Path(raw).expanduser() if raw else DEFAULT_CONFIG_FILE


def _float(raw: str | None, default: float | None) -> float | None:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


def _read_profile(path: Path, profile: str | None) -> dict[str, str]:
    if not path.exists():
        return {}
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error:
        return {}
    if profile and parser.has_section(profile):
        return dict(parser.items(profile))
    return dict(parser.defaults())


def load_settings(profile: str | None = None) -> GxSettings:
    """
    Load settings for a profile.

    Priority (highest to lowest):
    1. Environment variables (GXCLIENT_SERVER, GXCLIENT_USER, ...)
    2. The profile section of the config file, then its [DEFAULT] section
    3. Defaults
    """
    values = _read_profile(config_path(), profile)

    def pick(key: str) -> str | None:
        env = os.getenv(f"{_ENV_PREFIX}{key.upper()}")
        return env if env is not None else values.get(key)

    defaults = GxSettings()
    return GxSettings(
        server=(pick("server") or "").strip(),
        user=(pick("user") or "").strip(),
        password=pick("password") or "",
        poll_interval=_float(pick("poll_interval"), defaults.poll_interval),
        timeout=_float(pick("timeout"), defaults.timeout),
        request_timeout=_float(pick("request_timeout"), defaults.request_timeout),
        verbose=_bool(pick("verbose"), defaults.verbose),
    )
