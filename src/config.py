"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (log
file location, cache sizes and TTLs, job retention, sweep interval).
Values are read once at import time.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_ttl(name: str, default: float) -> Optional[float]:
    # Non-positive values disable age-based expiry
    value = _env_float(name, default)
    return value if value > 0 else None


# Application log written by the server process, rotated at midnight into
# <file>.<yyyy-mm-dd>.0.gz archives
LOG_FILE_PATH = Path(os.environ.get("LOG_FILE_PATH", "logs/application.log")).resolve()
LOG_EXCLUDED_MARKER = os.environ.get("LOG_EXCLUDED_MARKER", "INFO - Input to the controller method")
LOG_EXPORT_DELAY_SECONDS = _env_float("LOG_EXPORT_DELAY_SECONDS", 0.0)

# Query cache (memoized log reads)
QUERY_CACHE_MAX_CAPACITY = _env_int("QUERY_CACHE_MAX_CAPACITY", 5)
QUERY_CACHE_TTL_SECONDS = _env_ttl("QUERY_CACHE_TTL_SECONDS", 600.0)

# Archive cache (decoded rotated archives; no TTL, they never change)
ARCHIVE_CACHE_MAX_CAPACITY = _env_int("ARCHIVE_CACHE_MAX_CAPACITY", 3)

# Async jobs
JOB_RESULT_TTL_SECONDS = _env_float("JOB_RESULT_TTL_SECONDS", 300.0)
JOB_MAX_WORKERS = _env_int("JOB_MAX_WORKERS", 2)
SWEEP_INTERVAL_SECONDS = _env_float("SWEEP_INTERVAL_SECONDS", 60.0)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
LOG_JSON = _env_bool("LOG_JSON", True)
