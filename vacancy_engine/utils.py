"""Utility helpers shared across the engine."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


def sleep_until(deadline: float, clock: Clock = time.time, sleep: Sleeper = time.sleep) -> float:
    """Block until `clock()` reaches `deadline` (absolute wall-clock seconds).

    Returns the total number of seconds requested from `sleep`.
    """
    slept = 0.0
    while True:
        remaining = deadline - clock()
        if remaining <= 0:
            return slept
        sleep(remaining)
        slept += remaining


def join_url(base_url: str, endpoint: str) -> str:
    """Append an endpoint path (with optional query string) to a base URL."""
    if not endpoint:
        return base_url
    if not endpoint.startswith("/"):
        endpoint = "/" + endpoint
    return base_url.rstrip("/") + endpoint
