from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_LOG_LEVEL_ENV = "LOG_LEVEL"
_VERBOSE_ERRORS_ENV = "VERBOSE_ERRORS"
_ENVIRONMENT_ENV = "APP_ENV"
_SEED_DEMO_DATA_ENV = "SEED_DEMO_DATA"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    log_level: str
    environment: str
    verbose_errors: bool
    seed_demo_data: bool


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
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


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
    environment = _read_str_env(_ENVIRONMENT_ENV, "production").lower()
    return Settings(
        log_level=_read_log_level("INFO"),
        environment=environment,
        verbose_errors=_read_bool_env(_VERBOSE_ERRORS_ENV, environment == "development"),
        seed_demo_data=_read_bool_env(_SEED_DEMO_DATA_ENV, True),
    )
