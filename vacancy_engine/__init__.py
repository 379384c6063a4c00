"""Vacancy engine package.

The package keeps a cached snapshot of published Workable vacancies:
- `models.py` defines the vacancy record we cache (upstream fields kept verbatim).
- `sources/` contains the Workable API client.
- `aggregator.py` lists vacancies, enriches each with its description and writes the cache.
- `cache.py` wraps the key-value store behind a read-through accessor.
- `refresh.py` wires everything to a periodic scheduler.
"""

from .refresh import WorkableVacancies

__all__ = ["WorkableVacancies"]
