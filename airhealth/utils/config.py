"""Configuration helpers for runtime defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from ..errors import ConfigError

AQI_MODES = ("instant", "smoothed")

DEFAULTS: Dict[str, str] = {
    "AIRHEALTH_AQI_MODE": "smoothed",
    "AIRHEALTH_LOG_LEVEL": "INFO",
    "AIRHEALTH_PROVIDER_TOLERANCE": "50",
}


@dataclass(frozen=True)
class Settings:
    aqi_mode: str = "smoothed"
    log_level: str = "INFO"
    provider_tolerance: float = 50.0


def _lookup(key: str, file_values: Dict[str, Optional[str]]) -> str:
    value = os.environ.get(key)
    if value:
        return value
    value = file_values.get(key)
    if value:
        return value
    return DEFAULTS[key]


def load_settings(env_path: Path | None = None) -> Settings:
    """Load settings from environment variables, a .env file, then defaults."""
    env_path = env_path or Path(".env")
    file_values: Dict[str, Optional[str]] = {}
    if env_path.exists():
        file_values = dotenv_values(str(env_path))

    mode = _lookup("AIRHEALTH_AQI_MODE", file_values).strip().lower()
    if mode not in AQI_MODES:
        raise ConfigError(f"AIRHEALTH_AQI_MODE must be one of {AQI_MODES}, got {mode!r}")

    log_level = _lookup("AIRHEALTH_LOG_LEVEL", file_values).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown AIRHEALTH_LOG_LEVEL {log_level!r}")

    raw_tolerance = _lookup("AIRHEALTH_PROVIDER_TOLERANCE", file_values)
    try:
        tolerance = float(raw_tolerance)
    except ValueError as exc:
        raise ConfigError(f"AIRHEALTH_PROVIDER_TOLERANCE is not a number: {raw_tolerance!r}") from exc
    if tolerance < 0:
        raise ConfigError("AIRHEALTH_PROVIDER_TOLERANCE must be non-negative")

    return Settings(aqi_mode=mode, log_level=log_level, provider_tolerance=tolerance)
