"""
app/config.py

Application-level configuration helpers.

Every setting is read from the environment (after `.env` files are loaded
once) and cached as a frozen dataclass. Malformed values fall back to the
default rather than aborting startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class EngineSettings:
    """
    Runtime settings for the impact engine.

    ``fidelity_driver_config_path`` of None selects the bundled driver sets.
    """

    max_workers: int = 5
    weaning_threshold: float = 8.0
    observation_visits_target: int = 2
    fidelity_driver_config_path: str | None = None


@dataclass(frozen=True)
class RateLimitSettings:
    """
    Fixed-window request limit applied per caller.
    """

    max_requests: int = 60
    window_seconds: float = 60.0


@lru_cache(maxsize=1)
def get_engine_settings() -> EngineSettings:
    """
    Return cached impact engine settings from environment variables.
    """

    return EngineSettings(
        max_workers=max(1, _get_int_env("ENGINE_MAX_WORKERS", 5)),
        weaning_threshold=min(10.0, max(0.0, _get_float_env("WEANING_THRESHOLD", 8.0))),
        observation_visits_target=max(1, _get_int_env("OBSERVATION_VISITS_TARGET", 2)),
        fidelity_driver_config_path=_get_optional_str_env("FIDELITY_DRIVER_CONFIG_PATH"),
    )


@lru_cache(maxsize=1)
def get_rate_limit_settings() -> RateLimitSettings:
    """
    Return cached rate limit settings from environment variables.
    """

    return RateLimitSettings(
        max_requests=max(1, _get_int_env("RATE_LIMIT_MAX_REQUESTS", 60)),
        window_seconds=max(1.0, _get_float_env("RATE_LIMIT_WINDOW_SECONDS", 60.0)),
    )
