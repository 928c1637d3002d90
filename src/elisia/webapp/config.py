"""Configuration constants for the Elisia web dashboard."""
from __future__ import annotations

import os
from typing import Optional, Tuple

from dotenv import load_dotenv

from ..lok import DEFAULT_LAND_IDS, DEFAULT_LOK_API_URL, DEFAULT_MAX_CONCURRENCY, DEFAULT_TIMEOUT_SECONDS
from ..periods import MAX_CUSTOM_DAYS

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_land_ids(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.environ.get(name, "")
    parsed = tuple(part.strip() for part in raw.split(",") if part.strip())
    return parsed or default


SQLITE_FILE_NAME = os.environ.get("ELISIA_SQLITE", "elisia.db")
SESSION_SECRET = os.environ.get("SESSION_SECRET", "change-this-session-secret")
LOK_API_URL = os.environ.get("LOK_API_URL", DEFAULT_LOK_API_URL)
LOK_LAND_IDS: Tuple[str, ...] = _env_land_ids("LOK_LAND_IDS", DEFAULT_LAND_IDS)
LOK_MAX_CONCURRENCY = max(1, _env_int("LOK_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY))
LOK_TIMEOUT_SECONDS = _env_float("LOK_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
LOK_MAX_CUSTOM_DAYS = max(1, _env_int("LOK_MAX_CUSTOM_DAYS", MAX_CUSTOM_DAYS))
ADMIN_USERNAME: Optional[str] = os.environ.get("ADMIN_USERNAME") or None
ADMIN_PASSWORD: Optional[str] = os.environ.get("ADMIN_PASSWORD") or None
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOGIN_MAX_ATTEMPTS = _env_int("LOGIN_MAX_ATTEMPTS", 5)
LOGIN_LOCKOUT_MINUTES = _env_int("LOGIN_LOCKOUT_MINUTES", 15)
SESSION_USER_KEY = "user_id"

__all__ = [
    "SQLITE_FILE_NAME",
    "SESSION_SECRET",
    "LOK_API_URL",
    "LOK_LAND_IDS",
    "LOK_MAX_CONCURRENCY",
    "LOK_TIMEOUT_SECONDS",
    "LOK_MAX_CUSTOM_DAYS",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "LOG_LEVEL",
    "LOGIN_MAX_ATTEMPTS",
    "LOGIN_LOCKOUT_MINUTES",
    "SESSION_USER_KEY",
]
