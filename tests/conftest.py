from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from vacancy_engine.sources.workable import WorkableClient

START = 1_700_000_000.0


class FakeClock:
    """Wall clock that only moves when something sleeps on it."""

    def __init__(self, now: float = START) -> None:
        self.now = now
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeWorkable:
    """In-memory stand-in for the Workable SPI v3 endpoints."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.jobs: List[Dict[str, Any]] = []
        self.details: Dict[str, Any] = {}
        self.queued: Dict[str, List[Any]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.list_response: Optional[Any] = None

    def queue(self, path: str, *responses: Any) -> None:
        self.queued.setdefault(path, []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(
            {
                "path": path,
                "raw_path": request.url.raw_path.decode("ascii"),
                "params": dict(request.url.params),
                "at": self.clock.now,
                "auth": request.headers.get("Authorization"),
            }
        )
        if self.queued.get(path):
            return self._respond(self.queued[path].pop(0), request)
        if path == "/spi/v3/jobs":
            if self.list_response is not None:
                return self._respond(self.list_response, request)
            return httpx.Response(200, json={"jobs": self.jobs})
        shortcode = path.rsplit("/", 1)[-1]
        if shortcode in self.details:
            return self._respond(self.details[shortcode], request)
        return httpx.Response(404, json={"error": "Not found"})

    @staticmethod
    def _respond(item: Any, request: httpx.Request) -> httpx.Response:
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def paths(self) -> List[str]:
        return [c["path"] for c in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def workable(clock: FakeClock) -> FakeWorkable:
    return FakeWorkable(clock)


@pytest.fixture
def transport(workable: FakeWorkable) -> httpx.MockTransport:
    return httpx.MockTransport(workable.handler)


@pytest.fixture
def make_client(transport: httpx.MockTransport, clock: FakeClock) -> Callable[..., WorkableClient]:
    clients: List[WorkableClient] = []

    def factory(**kwargs: Any) -> WorkableClient:
        kwargs.setdefault("transport", transport)
        kwargs.setdefault("clock", clock.time)
        kwargs.setdefault("sleep", clock.sleep)
        client = WorkableClient("acme", "secret-token", **kwargs)
        clients.append(client)
        return client

    yield factory
    for c in clients:
        c.close()


def job(shortcode: str, title: str, **extra: Any) -> Dict[str, Any]:
    return {"shortcode": shortcode, "title": title, **extra}
