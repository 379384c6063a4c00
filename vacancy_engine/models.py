"""Data models for the vacancy engine.

A vacancy is whatever the Workable list endpoint returns for one job, plus the
`full_description` we fetch separately. Upstream fields are kept verbatim
(`extra="allow"`) so front-end code sees the payload it expects.

This file uses Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import RATE_LIMIT_GRACE_S


class Vacancy(BaseModel):
    """One published job posting, enriched with its full description."""

    model_config = ConfigDict(extra="allow")

    shortcode: str = Field(default="", description="Workable's unique short identifier.")
    title: str = ""
    full_description: str = Field(
        default="",
        description="HTML description from the single-job endpoint; empty when unavailable.",
    )


VacancyCollection = List[Vacancy]


def dump_collection(vacancies: Iterable[Vacancy]) -> List[dict]:
    """Serialize vacancies to the JSON-compatible list stored in the cache."""
    return [v.model_dump(mode="json") for v in vacancies]


def load_collection(raw: Iterable[Mapping[str, Any]]) -> VacancyCollection:
    """Rebuild vacancies from a cached list."""
    return [Vacancy.model_validate(dict(item)) for item in raw]


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(value.strip()))
    except (ValueError, OverflowError):
        return None


class RateLimitState(BaseModel):
    """Rate limit information carried by a single response.

    Only meaningful while deciding what to do with that response; never stored.
    """

    remaining: Optional[int] = None
    reset_at: Optional[int] = Field(default=None, description="Unix timestamp when the window resets.")

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitState":
        return cls(
            remaining=_parse_int(headers.get("X-Rate-Limit-Remaining")),
            reset_at=_parse_int(headers.get("X-Rate-Limit-Reset")),
        )

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.reset_at is not None and self.remaining == 0

    @property
    def resume_at(self) -> Optional[float]:
        """Wall-clock time after which a retry is allowed."""
        if self.reset_at is None:
            return None
        return float(self.reset_at + RATE_LIMIT_GRACE_S)
