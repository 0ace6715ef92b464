"""
GeeksforGeeks profile scraper.

The profile page shows solved counts as ``BASIC (3)``, ``EASY (16)``,
``MEDIUM (51)``, ``HARD (5)`` tabs, plus "Problem Solved" and "Coding Score"
tiles. ``parse_profile`` runs the strategies in ``STRATEGIES`` in order; each
one only fills fields the earlier ones left undetermined.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup  # type: ignore

from ...schemas.stats import PlatformStatistics
from .base import PlatformAdapter
from .extraction import (
    extract_labeled_number,
    find_number_by_range,
    number_candidates,
    parse_document,
    search_labeled_number,
)

logger = logging.getLogger(__name__)

PROFILE_URL = "https://www.geeksforgeeks.org/user/{username}/"

BANDS = ("basic", "easy", "medium", "hard")

# (field, context keywords, min, max) for the numeric-context heuristic
CONTEXT_RANGES: List[Tuple[str, Tuple[str, ...], int, int]] = [
    ("problem_solved", ("problem solved", "problems solved"), 0, 9999),
    ("coding_score", ("coding score",), 0, 9999),
    ("basic", ("basic",), 0, 9999),
    ("easy", ("easy",), 0, 9999),
    ("medium", ("medium",), 0, 9999),
    ("hard", ("hard",), 0, 9999),
]

Fields = Dict[str, Optional[int]]


def _labeled_elements(document: BeautifulSoup, fields: Fields) -> None:
    for band in BANDS:
        if fields[band] is None:
            # "Basic" and "Easy" can share one element; don't read easy from it
            exclude = "basic" if band == "easy" else None
            fields[band] = extract_labeled_number(document, band, exclude=exclude)


def _page_text(document: BeautifulSoup, fields: Fields) -> None:
    body = document.body or document
    text = body.get_text(" ", strip=True)
    for band in BANDS:
        if fields[band] is None:
            fields[band] = search_labeled_number(text, band)


def _numeric_context(document: BeautifulSoup, fields: Fields) -> None:
    for field, keywords, minimum, maximum in CONTEXT_RANGES:
        if fields[field] is not None:
            continue
        ranked = []
        for keyword in keywords:
            for number, context in number_candidates(document, keyword):
                # Context starts with the parent's text, so an early mention is a near one
                ranked.append((context.find(keyword), len(context), number, context))
        ranked.sort(key=lambda item: item[:2])
        candidates = [(number, context) for _pos, _size, number, context in ranked]
        fields[field] = find_number_by_range(candidates, minimum, maximum)


STRATEGIES: List[Callable[[BeautifulSoup, Fields], None]] = [
    _labeled_elements,
    _page_text,
    _numeric_context,
]


def parse_profile(document: BeautifulSoup) -> Fields:
    fields: Fields = {band: None for band in BANDS}
    fields["problem_solved"] = None
    fields["coding_score"] = None
    for strategy in STRATEGIES:
        if all(value is not None for value in fields.values()):
            break
        strategy(document, fields)
    return fields


def build_stats(fields: Fields) -> PlatformStatistics:
    basic = fields.get("basic") or 0
    easy = fields.get("easy") or 0
    medium = fields.get("medium") or 0
    hard = fields.get("hard") or 0
    total = fields.get("problem_solved")
    if total is None:
        total = basic + easy + medium + hard

    return PlatformStatistics(
        platform=GeeksForGeeksAdapter.platform,
        total_solved=total,
        easy_solved=basic + easy,
        medium_solved=medium,
        hard_solved=hard,
        coding_score=fields.get("coding_score"),
    )


class GeeksForGeeksAdapter(PlatformAdapter):
    platform = "geeksforgeeks"

    async def fetch_user_data(self, username: str) -> Optional[PlatformStatistics]:
        logger.info("Fetching GeeksforGeeks data for %s", username)
        try:
            html = await self._fetch_html(
                PROFILE_URL.format(username=username), headers={"Cache-Control": "no-cache"}
            )
            fields = parse_profile(parse_document(html))
        except httpx.HTTPError as e:
            logger.error("GeeksforGeeks request failed for %s: %s", username, e)
            return PlatformStatistics.zero(self.platform, scrape_failed=True)
        except Exception:
            logger.exception("GeeksforGeeks extraction failed for %s", username)
            return PlatformStatistics.zero(self.platform, scrape_failed=True)

        logger.info("GeeksforGeeks fields for %s: %s", username, fields)
        return build_stats(fields)
