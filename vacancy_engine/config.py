"""Runtime configuration, read from the environment (and a `.env` file if present)."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


WORKABLE_SUBDOMAIN = os.getenv("WORKABLE_SUBDOMAIN", "")
WORKABLE_ACCESS_TOKEN = os.getenv("WORKABLE_ACCESS_TOKEN", "")
WORKABLE_CACHE_FILE = os.getenv("WORKABLE_CACHE_FILE", "workable_cache.json")

TIMEOUT_S = _float_env("WORKABLE_TIMEOUT_S", 20.0)
MAX_RATE_LIMIT_RETRIES = _int_env("WORKABLE_MAX_RATE_LIMIT_RETRIES", 5)

# Fixed names shared by the cache and the scheduler.
CACHE_KEY = "workable_vacancies"
CRON_HOOK = "workable_fetch_api_vacancies"
REFRESH_INTERVAL_S = 60 * 60

# Seconds added to X-Rate-Limit-Reset before retrying.
RATE_LIMIT_GRACE_S = 3
