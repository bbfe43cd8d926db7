"""
Configuration management for httpreq.

Loads runtime settings from environment variables or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from httpreq.errors import InputError


DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 10

ENV_LOCATIONS = [
    Path.home() / ".httpreq" / ".env",
    Path.home() / ".config" / "httpreq" / ".env",
    Path.cwd() / ".env",
]


def load_env_files(locations: list[Path] | None = None) -> Path | None:
    """Load the first .env file found. Existing variables are not overridden."""
    for env_path in locations if locations is not None else ENV_LOCATIONS:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise InputError(f"Invalid value for {name}: '{raw}'")
    if value <= 0:
        raise InputError(f"{name} must be positive, got '{raw}'")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InputError(f"Invalid value for {name}: '{raw}'")
    if value < 0:
        raise InputError(f"{name} must not be negative, got '{raw}'")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise InputError(f"Invalid value for {name}: '{raw}'")


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by the executor and logging."""

    # Exchange
    timeout: float = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    verify_ssl: bool = True

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    @classmethod
    def from_env(cls, load_dotenv_files: bool = True) -> "Settings":
        """Load settings from environment variables."""
        if load_dotenv_files:
            load_env_files()
        return cls(
            timeout=_env_float("HTTPREQ_TIMEOUT", DEFAULT_TIMEOUT),
            max_redirects=_env_int("HTTPREQ_MAX_REDIRECTS", DEFAULT_MAX_REDIRECTS),
            verify_ssl=_env_bool("HTTPREQ_VERIFY_SSL", True),
            log_level=os.getenv("HTTPREQ_LOG_LEVEL", "WARNING").upper(),
            log_file=os.getenv("HTTPREQ_LOG_FILE") or None,
        )
