"""Workable API client.

Docs: https://workable.readme.io/docs

Every request is authenticated with a bearer token and decoded as JSON. When
the response says the rate limit is used up (`X-Rate-Limit-Remaining: 0`), the
client sleeps until `X-Rate-Limit-Reset` + 3 seconds and sends the same request
again, up to `max_rate_limit_retries` times.

Refreshes run from a background scheduler, so the blocking wait never sits on
a request-serving thread.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..config import MAX_RATE_LIMIT_RETRIES, TIMEOUT_S
from ..errors import RateLimitExceeded, WorkableDecodeError, WorkableTransportError
from ..models import RateLimitState
from ..utils import Clock, Sleeper, join_url, sleep_until

logger = logging.getLogger(__name__)


class WorkableClient:
    """Authenticated JSON client for one Workable account."""

    api_domain = "workable.com"

    def __init__(
        self,
        subdomain: str,
        access_token: str,
        timeout_s: float = TIMEOUT_S,
        max_rate_limit_retries: int = MAX_RATE_LIMIT_RETRIES,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Clock = time.time,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self._base_url = f"https://{subdomain}.{self.api_domain}/spi/v3"
        self._max_rate_limit_retries = max(max_rate_limit_retries, 0)
        self._clock = clock
        self._sleep = sleep
        self._client = httpx.Client(
            timeout=timeout_s,
            follow_redirects=True,
            transport=transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "WorkableClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, url: str, endpoint: str) -> httpx.Response:
        try:
            return self._client.get(url)
        except httpx.HTTPError as exc:
            raise WorkableTransportError(f"GET {endpoint} failed: {exc}", endpoint=endpoint) from exc

    def request(self, endpoint: str) -> Any:
        """GET `endpoint` (relative to the base URL) and return the decoded JSON body.

        Raises:
            WorkableTransportError: network failure or non-2xx status.
            WorkableDecodeError: the body is not JSON.
            RateLimitExceeded: the rate limit stayed exhausted after every allowed wait.
        """
        url = join_url(self._base_url, endpoint)
        waits = 0

        while True:
            resp = self._send(url, endpoint)
            limit = RateLimitState.from_headers(resp.headers)
            if not limit.exhausted:
                break
            if waits >= self._max_rate_limit_retries:
                raise RateLimitExceeded(
                    f"Rate limit still exhausted for {endpoint} after {waits} waits",
                    endpoint=endpoint,
                    attempts=waits + 1,
                )
            waits += 1
            logger.warning(
                "Rate limit exhausted on %s; waiting until %s (wait %d/%d)",
                endpoint,
                limit.resume_at,
                waits,
                self._max_rate_limit_retries,
            )
            sleep_until(limit.resume_at, clock=self._clock, sleep=self._sleep)

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise WorkableTransportError(
                f"GET {endpoint} returned HTTP {resp.status_code}",
                endpoint=endpoint,
                status_code=resp.status_code,
            ) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise WorkableDecodeError(f"GET {endpoint} returned a non-JSON body", endpoint=endpoint) from exc

    def list_published(self) -> Any:
        """Fetch the single page of published jobs."""
        return self.request("/jobs?state=published")

    def get_job(self, shortcode: str) -> Any:
        """Fetch one job, including its `full_description`."""
        return self.request(f"/jobs/{quote(shortcode, safe='')}")
