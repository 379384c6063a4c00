"""Exceptions raised by the Workable client.

Callers can tell apart a transport failure, an undecodable body and a rate
limit that never cleared. A legitimate empty payload is not an error.
"""

from __future__ import annotations

from typing import Optional


class WorkableError(Exception):
    """Base class for every failure talking to the Workable API."""

    def __init__(self, message: str, endpoint: str = "") -> None:
        super().__init__(message)
        self.endpoint = endpoint


class WorkableTransportError(WorkableError):
    """Network failure, timeout or non-2xx response."""

    def __init__(self, message: str, endpoint: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message, endpoint)
        self.status_code = status_code


class WorkableDecodeError(WorkableError):
    """The response body was not valid JSON."""


class RateLimitExceeded(WorkableError):
    """The API still reported an exhausted rate limit after the allowed waits."""

    def __init__(self, message: str, endpoint: str = "", attempts: int = 0) -> None:
        super().__init__(message, endpoint)
        self.attempts = attempts
