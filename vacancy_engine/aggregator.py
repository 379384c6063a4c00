"""List, enrich and cache published vacancies."""

from __future__ import annotations

import logging
from typing import List, Optional

from .cache import VacancyCache
from .errors import WorkableError
from .models import Vacancy, VacancyCollection
from .normalize import description_from_detail, listing_entries, merge_vacancy
from .sources.workable import WorkableClient

logger = logging.getLogger(__name__)


class VacancyAggregator:
    """Fetch every published vacancy with its full description and cache the result."""

    def __init__(self, client: WorkableClient, cache: VacancyCache) -> None:
        self.client = client
        self.cache = cache

    def _describe(self, listing: dict) -> str:
        shortcode = listing.get("shortcode")
        if not shortcode:
            logger.warning("Vacancy %r has no shortcode; leaving description empty", listing.get("title"))
            return ""
        try:
            detail = self.client.get_job(str(shortcode))
        except WorkableError as exc:
            logger.warning("Could not fetch description for %s: %s", shortcode, exc)
            return ""
        description = description_from_detail(detail)
        if not description:
            logger.info("Vacancy %s has no full_description", shortcode)
        return description

    def fetch_vacancies(self, should_return: bool = False) -> Optional[VacancyCollection]:
        """Run one refresh cycle.

        Args:
            should_return: If True, return the collection; otherwise only the
                cache is updated.

        Raises:
            WorkableError: the list request failed. The cache is left untouched.
        """
        payload = self.client.list_published()

        out: List[Vacancy] = []
        for listing in listing_entries(payload):
            out.append(merge_vacancy(listing, self._describe(listing)))

        self.cache.write(out)
        logger.info("Cached %d vacancies", len(out))

        if should_return:
            return out
        return None
