from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_DATABASE_URL_ENV = "PIHEAT_DATABASE_URL"
_SENSOR_PATH_ENV = "PIHEAT_SENSOR_PATH"
_ALLOW_SYNTHETIC_ENV = "PIHEAT_ALLOW_SYNTHETIC"
_HOST_ENV = "PIHEAT_HOST"
_PORT_ENV = "PIHEAT_PORT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_SENSOR_PATH = "/sys/class/thermal/thermal_zone0/temp"
DEFAULT_PORT = 8082


@dataclass(frozen=True)
class Settings:
    database_url: str
    sensor_path: str
    allow_synthetic: bool
    host: str
    port: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in {"1", "true", "yes", "on"}:
        return True
    if candidate in {"0", "false", "no", "off"}:
        return False
    return default


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if 0 < parsed < 65536 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=_read_str_env(_DATABASE_URL_ENV, "sqlite:///./temperature.db"),
        sensor_path=_read_str_env(_SENSOR_PATH_ENV, DEFAULT_SENSOR_PATH),
        allow_synthetic=_read_bool_env(_ALLOW_SYNTHETIC_ENV, True),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_port(DEFAULT_PORT),
        log_level=_read_log_level("INFO"),
    )
