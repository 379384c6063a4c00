"""Normalization of Workable payloads.

This module contains deterministic parsing logic:
- pulling the job entries out of a list response
- picking the description out of a single-job response
- merging both into a `Vacancy`

Keeping it separate from the HTTP code makes the merge rules easy to test.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .models import Vacancy

logger = logging.getLogger(__name__)


def listing_entries(payload: Any) -> List[Dict[str, Any]]:
    """Return the job entries of a list response, in upstream order.

    A payload without a `jobs` field is a valid empty listing.
    """
    if not isinstance(payload, Mapping):
        logger.warning("List response is a %s, not an object; treating as empty", type(payload).__name__)
        return []

    jobs = payload.get("jobs")
    if jobs is None:
        return []
    if not isinstance(jobs, list):
        logger.warning("List response 'jobs' is a %s, not an array; treating as empty", type(jobs).__name__)
        return []

    out: List[Dict[str, Any]] = []
    for j in jobs:
        if not isinstance(j, Mapping):
            logger.warning("Skipping non-object job entry: %r", j)
            continue
        out.append(dict(j))
    return out


def description_from_detail(detail: Any) -> str:
    """Return the detail's `full_description`, or "" when it is missing."""
    if isinstance(detail, Mapping):
        val = detail.get("full_description")
        if isinstance(val, str):
            return val
    return ""


def merge_vacancy(listing: Mapping[str, Any], description: str) -> Vacancy:
    """Combine a list entry with its description."""
    data = dict(listing)
    data["full_description"] = description
    # Declared string fields; be lenient with odd payloads.
    for key in ("shortcode", "title"):
        if data.get(key) is None:
            data.pop(key, None)
        elif not isinstance(data[key], str):
            data[key] = str(data[key])
    return Vacancy.model_validate(data)
