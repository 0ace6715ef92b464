from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ...schemas.stats import PlatformStatistics, empty_rating_bands
from .base import PlatformAdapter, get_json

logger = logging.getLogger(__name__)

API_BASE = "https://codeforces.com/api"

# Upper bounds of the closed-open 200-wide bands between 1000 and 3000
_BAND_EDGES: List[Tuple[int, str]] = [
    (1000, "below1000"),
    (1200, "range1000to1199"),
    (1400, "range1200to1399"),
    (1600, "range1400to1599"),
    (1800, "range1600to1799"),
    (2000, "range1800to1999"),
    (2200, "range2000to2199"),
    (2400, "range2200to2399"),
    (2600, "range2400to2599"),
    (2800, "range2600to2799"),
    (3000, "range2800to2999"),
]

EASY_MAX_RATING = 1200
MEDIUM_MAX_RATING = 1800


def rating_band(rating: Optional[int]) -> str:
    if rating is None:
        return "unrated"
    for upper, label in _BAND_EDGES:
        if rating < upper:
            return label
    return "above3000"


def difficulty_of(rating: Optional[int]) -> str:
    if rating is None or rating <= EASY_MAX_RATING:
        return "easy"
    if rating <= MEDIUM_MAX_RATING:
        return "medium"
    return "hard"


def build_contest_stats(ratings: List[Dict[str, Any]]) -> Dict[str, Any]:
    if not ratings:
        return {"contests": 0, "rank": 0, "last_three_ranks": [], "rating_change": 0}

    by_time = sorted(ratings, key=lambda rc: rc.get("ratingUpdateTimeSeconds", 0), reverse=True)
    latest = by_time[0]
    return {
        "contests": len(ratings),
        "rank": min(rc["rank"] for rc in ratings),
        "last_three_ranks": [rc["rank"] for rc in by_time[:3]],
        "rating_change": latest.get("newRating", 0) - latest.get("oldRating", 0),
    }


def build_problem_stats(submissions: List[Dict[str, Any]]) -> Dict[str, Any]:
    solved: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
    for sub in submissions:
        if sub.get("verdict") != "OK":
            continue
        problem = sub.get("problem") or {}
        key = (problem.get("contestId"), problem.get("index"))
        solved.setdefault(key, problem)

    bands = empty_rating_bands()
    counts = {"easy": 0, "medium": 0, "hard": 0}
    for problem in solved.values():
        rating = problem.get("rating")
        bands[rating_band(rating)] += 1
        counts[difficulty_of(rating)] += 1

    return {
        "total_solved": len(solved),
        "easy_solved": counts["easy"],
        "medium_solved": counts["medium"],
        "hard_solved": counts["hard"],
        "rating_wise_count": bands,
    }


def build_stats(user: Dict[str, Any], ratings: List[Dict[str, Any]], submissions: List[Dict[str, Any]]) -> PlatformStatistics:
    return PlatformStatistics(
        rating=user.get("rating") or 0,
        max_rating=user.get("maxRating") or 0,
        contribution=user.get("contribution") or 0,
        friends=user.get("friendOfCount") or 0,
        title=user.get("maxRank") or "",
        **build_contest_stats(ratings),
        **build_problem_stats(submissions),
    )


def _ok_result(payload: Any) -> Optional[Any]:
    if isinstance(payload, BaseException) or not isinstance(payload, dict):
        return None
    if payload.get("status") != "OK":
        return None
    return payload.get("result")


class CodeforcesAdapter(PlatformAdapter):
    platform = "codeforces"

    async def fetch_user_data(self, username: str) -> Optional[PlatformStatistics]:
        try:
            async with self.client(headers={"Accept": "application/json"}) as client:
                info, rating, status = await asyncio.gather(
                    get_json(client, f"{API_BASE}/user.info", params={"handles": username}),
                    get_json(client, f"{API_BASE}/user.rating", params={"handle": username}),
                    get_json(client, f"{API_BASE}/user.status", params={"handle": username}),
                    return_exceptions=True,
                )
        except httpx.HTTPError as e:
            logger.error("Codeforces API error for %s: %s", username, e)
            return None

        users = _ok_result(info)
        if not users:
            if isinstance(info, BaseException):
                logger.error("Codeforces user.info failed for %s: %s", username, info)
            else:
                logger.info("Codeforces user %s not found", username)
            return None

        for name, result in (("user.rating", rating), ("user.status", status)):
            if isinstance(result, BaseException):
                logger.warning("Codeforces %s failed for %s: %s", name, username, result)

        ratings = _ok_result(rating) or []
        submissions = _ok_result(status) or []

        try:
            return build_stats(users[0], ratings, submissions)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Unexpected Codeforces payload for %s: %s", username, e)
            return None
