"""Periodic refresh wiring and the public read API.

`WorkableVacancies` is what the rest of an application holds on to:
- `initiate_schedule()` registers the hourly refresh once,
- `refresh()` is the scheduled callback,
- `get_vacancies()` reads through the cache.

Without a subdomain and an access token the instance stays inert: it never
schedules anything and never talks to the API.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

import httpx

from .aggregator import VacancyAggregator
from .cache import CacheStore, MemoryCacheStore, VacancyCache
from .config import (
    CACHE_KEY,
    CRON_HOOK,
    MAX_RATE_LIMIT_RETRIES,
    REFRESH_INTERVAL_S,
    TIMEOUT_S,
    WORKABLE_ACCESS_TOKEN,
    WORKABLE_SUBDOMAIN,
)
from .errors import WorkableError
from .models import VacancyCollection
from .sources.workable import WorkableClient
from .utils import Clock, Sleeper

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def next_scheduled(self, hook: str) -> Optional[float]:
        """Return the next run time of `hook`, or None if it is not scheduled."""
        ...

    def schedule_event(self, first_run: float, interval_s: float, hook: str, callback: Callable[[], object]) -> None:
        ...


@dataclass
class _Event:
    interval_s: float
    callback: Callable[[], object]
    next_run: float
    timer: Optional[threading.Timer] = None


class IntervalScheduler:
    """Small in-process scheduler running each hook on a daemon timer thread."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._events: Dict[str, _Event] = {}
        self._lock = threading.Lock()

    def next_scheduled(self, hook: str) -> Optional[float]:
        with self._lock:
            event = self._events.get(hook)
            return event.next_run if event else None

    def schedule_event(self, first_run: float, interval_s: float, hook: str, callback: Callable[[], object]) -> None:
        with self._lock:
            if hook in self._events:
                raise ValueError(f"{hook!r} is already scheduled")
            event = _Event(interval_s=interval_s, callback=callback, next_run=first_run)
            self._events[hook] = event
            self._arm(hook, event)

    def unschedule(self, hook: str) -> None:
        with self._lock:
            event = self._events.pop(hook, None)
        if event and event.timer:
            event.timer.cancel()

    def shutdown(self) -> None:
        with self._lock:
            hooks = list(self._events)
        for hook in hooks:
            self.unschedule(hook)

    def _arm(self, hook: str, event: _Event) -> None:
        delay = max(event.next_run - self._clock(), 0.0)
        event.timer = threading.Timer(delay, self._fire, args=(hook,))
        event.timer.daemon = True
        event.timer.start()

    def _fire(self, hook: str) -> None:
        with self._lock:
            event = self._events.get(hook)
            if event is None:
                return
            event.next_run = self._clock() + event.interval_s
            self._arm(hook, event)
        try:
            event.callback()
        except Exception:
            logger.exception("Scheduled hook %s failed", hook)


class WorkableVacancies:
    """Cached access to the published vacancies of one Workable account."""

    def __init__(
        self,
        subdomain: Optional[str],
        access_token: Optional[str],
        store: Optional[CacheStore] = None,
        scheduler: Optional[Scheduler] = None,
        cache_key: str = CACHE_KEY,
        timeout_s: float = TIMEOUT_S,
        max_rate_limit_retries: int = MAX_RATE_LIMIT_RETRIES,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Clock = time.time,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self.cache = VacancyCache(store if store is not None else MemoryCacheStore(), key=cache_key)
        self.scheduler = scheduler
        self._clock = clock
        self.client: Optional[WorkableClient] = None
        self.aggregator: Optional[VacancyAggregator] = None

        subdomain = (subdomain or "").strip()
        access_token = (access_token or "").strip()
        if not subdomain or not access_token:
            logger.warning("Workable subdomain or access token missing; vacancy refresh disabled")
            return

        self.client = WorkableClient(
            subdomain,
            access_token,
            timeout_s=timeout_s,
            max_rate_limit_retries=max_rate_limit_retries,
            transport=transport,
            clock=clock,
            sleep=sleep,
        )
        self.aggregator = VacancyAggregator(self.client, self.cache)

    @classmethod
    def from_config(cls, store: Optional[CacheStore] = None, scheduler: Optional[Scheduler] = None) -> "WorkableVacancies":
        """Build an instance from the environment configuration."""
        return cls(WORKABLE_SUBDOMAIN, WORKABLE_ACCESS_TOKEN, store=store, scheduler=scheduler)

    @property
    def active(self) -> bool:
        return self.aggregator is not None

    def initiate_schedule(self) -> bool:
        """Schedule the hourly refresh unless it is already scheduled.

        Returns True if a new event was registered.
        """
        if not self.active or self.scheduler is None:
            return False
        if self.scheduler.next_scheduled(CRON_HOOK) is not None:
            return False
        self.scheduler.schedule_event(self._clock(), REFRESH_INTERVAL_S, CRON_HOOK, self.refresh)
        logger.info("Scheduled %s every %ds", CRON_HOOK, REFRESH_INTERVAL_S)
        return True

    def refresh(self) -> bool:
        """Scheduled callback: fetch and cache. On failure the previous cache stays."""
        if not self.active:
            return False
        try:
            self.aggregator.fetch_vacancies(should_return=False)
        except WorkableError:
            logger.exception("Vacancy refresh failed; keeping the previously cached vacancies")
            return False
        return True

    def get_vacancies(self) -> VacancyCollection:
        """Return the cached vacancies, fetching synchronously on a cold cache."""
        if not self.active:
            return self.cache.read_cached() or []
        return self.cache.read(lambda: self.aggregator.fetch_vacancies(should_return=True))

    def close(self) -> None:
        if self.client is not None:
            self.client.close()

    def __enter__(self) -> "WorkableVacancies":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
