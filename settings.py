from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

_LOG_LEVEL_ENV = "LOG_LEVEL"
_MAX_UPLOAD_BYTES_ENV = "MAX_UPLOAD_BYTES"
_DEFAULT_FORMAT_ENV = "DEFAULT_LOG_FORMAT"

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    log_level: str
    max_upload_bytes: int
    default_log_format: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    return _read_str_env(_LOG_LEVEL_ENV, default).upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        log_level=_read_log_level("INFO"),
        max_upload_bytes=_read_positive_int(_MAX_UPLOAD_BYTES_ENV, DEFAULT_MAX_UPLOAD_BYTES),
        default_log_format=_read_str_env(_DEFAULT_FORMAT_ENV, "txt").lower(),
    )
