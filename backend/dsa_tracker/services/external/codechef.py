from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import httpx
from bs4 import BeautifulSoup  # type: ignore

from ...config import settings
from ...schemas.stats import PlatformStatistics
from .base import PlatformAdapter
from .extraction import extract_number, extract_text, parse_document

logger = logging.getLogger(__name__)

PROFILE_URL = "https://www.codechef.com/users/{username}"

# Selector fallbacks, most specific first
RATING_SELECTORS = [
    ".rating-number",
    ".rating",
    ".rating-header .number",
    ".contest-rating-number",
    ".user-details-container .rating",
]
MAX_RATING_SELECTORS = [
    ".rating-data-section .number",
    ".max-rating",
    ".highest-rating",
    ".rating-data .rating",
]
STARS_SELECTORS = [".rating-star", ".star-rating", ".user-rating .star"]
GLOBAL_RANK_SELECTORS = [".global-rank .rank-number", ".rank", ".ranking-number"]
COUNTRY_RANK_SELECTORS = [".country-rank .rank-number", ".country-ranking"]
CONTESTS_SELECTORS = [".contest-participated-count", ".contests .number", ".total-contests"]
SOLVED_SELECTORS = [".problems-solved .number", ".total-problems", ".solved-count"]
DIVISION_SELECTORS = [".rating-title", ".division", ".rating-category"]

NOT_FOUND_MARKERS = ("page not found", "user not found")
# "404" only counts in the page title or a heading; profile numbers can contain it
ERROR_CODE_RE = re.compile(r"\b404\b")


def is_profile_not_found(document: BeautifulSoup) -> bool:
    body = document.body or document
    text = body.get_text(" ", strip=True).lower()
    if any(marker in text for marker in NOT_FOUND_MARKERS):
        return True
    for heading in [document.title, *document.find_all(["h1", "h2"])]:
        if heading is not None and ERROR_CODE_RE.search(heading.get_text(" ", strip=True)):
            return True
    return document.select_one(".error-message") is not None


def parse_profile(document: BeautifulSoup) -> Dict[str, Any]:
    rating = extract_number(document, RATING_SELECTORS)
    max_rating = extract_number(document, MAX_RATING_SELECTORS)
    return {
        "rating": rating or 0,
        "max_rating": max_rating or rating or 0,
        "stars": extract_text(document, STARS_SELECTORS),
        "rank": extract_number(document, GLOBAL_RANK_SELECTORS) or 0,
        "country_rank": extract_number(document, COUNTRY_RANK_SELECTORS) or 0,
        "contests": extract_number(document, CONTESTS_SELECTORS) or 0,
        "total_solved": extract_number(document, SOLVED_SELECTORS) or 0,
        "division": extract_text(document, DIVISION_SELECTORS),
    }


class CodeChefAdapter(PlatformAdapter):
    """
    CodeChef has no public API. Scraping is switched off unless
    ``CODECHEF_SCRAPING_ENABLED`` is set; while off, the adapter reports
    ``implemented = False`` and returns a zero record marked as a placeholder.
    """

    platform = "codechef"

    def __init__(self, *args: Any, enabled: Optional[bool] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.implemented = settings.CODECHEF_SCRAPING_ENABLED if enabled is None else enabled

    async def fetch_user_data(self, username: str) -> Optional[PlatformStatistics]:
        if not self.implemented:
            logger.warning("CodeChef scraping disabled; returning placeholder stats for %s", username)
            return PlatformStatistics.zero(self.platform, placeholder=True)

        url = PROFILE_URL.format(username=username)
        try:
            async with self.client(headers={"Referer": "https://www.codechef.com/"}) as client:
                resp = await client.get(url)
        except httpx.HTTPError as e:
            logger.error("CodeChef request failed for %s: %s", username, e)
            return None

        if resp.status_code != 200:
            logger.info("CodeChef profile not found for %s: HTTP %s", username, resp.status_code)
            return None

        try:
            document = parse_document(resp.text)
            if is_profile_not_found(document):
                logger.info("CodeChef profile page reports %s not found", username)
                return None
            fields = parse_profile(document)
        except Exception:
            logger.exception("CodeChef scrape failed for %s", username)
            return None

        logger.info(
            "CodeChef %s - rating: %s, max: %s, problems: %s",
            username, fields["rating"], fields["max_rating"], fields["total_solved"],
        )
        return PlatformStatistics(platform=self.platform, **fields)
