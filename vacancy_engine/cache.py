"""Cache stores and the read-through vacancy cache.

A store only needs `get`/`set`/`delete`. `get` returns None for a missing key,
so an empty list stays a cache hit.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Protocol

from .config import CACHE_KEY
from .errors import WorkableError
from .models import Vacancy, VacancyCollection, dump_collection, load_collection

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryCacheStore:
    """Process-local store. Values are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileCacheStore:
    """Store backed by a single JSON document on disk.

    An unreadable or corrupt file is treated as an empty store.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Cache file %s is unreadable; ignoring it", self.path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Cache file %s does not hold an object; ignoring it", self.path)
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class VacancyCache:
    """Read-through cache for the vacancy collection under one fixed key."""

    def __init__(self, store: CacheStore, key: str = CACHE_KEY) -> None:
        self.store = store
        self.key = key

    def write(self, vacancies: Iterable[Vacancy]) -> None:
        """Overwrite the cached collection. No expiry is set here."""
        self.store.set(self.key, dump_collection(vacancies))

    def read_cached(self) -> Optional[VacancyCollection]:
        """Return the cached collection, or None on a miss."""
        raw = self.store.get(self.key)
        if raw is None:
            return None
        if not isinstance(raw, list):
            logger.warning("Cached value under %r is a %s; treating as a miss", self.key, type(raw).__name__)
            return None
        try:
            return load_collection(raw)
        except (TypeError, ValueError):
            logger.warning("Cached value under %r failed validation; treating as a miss", self.key, exc_info=True)
            return None

    def read(self, fallback: Callable[[], Optional[VacancyCollection]]) -> VacancyCollection:
        """Return the cached collection, refreshing synchronously on a miss.

        `fallback` is expected to fetch and return the collection (and write it).
        If it fails, an empty collection is returned.
        """
        cached = self.read_cached()
        if cached is not None:
            return cached

        logger.info("Vacancy cache miss; fetching synchronously")
        try:
            fresh = fallback()
        except WorkableError:
            logger.exception("Synchronous vacancy fetch failed")
            return []
        return list(fresh or [])
