from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ...schemas.stats import PlatformStatistics
from .base import PlatformAdapter

logger = logging.getLogger(__name__)

GRAPHQL_URL = "https://leetcode.com/graphql"

PROFILE_QUERY = """
query getUserProfile($username: String!) {
  matchedUser(username: $username) {
    username
    submitStats: submitStatsGlobal {
      acSubmissionNum {
        difficulty
        count
      }
    }
  }
}
"""


def _count_for(ac_list: List[Dict[str, Any]], difficulty: str) -> int:
    for item in ac_list:
        if item.get("difficulty") == difficulty:
            return int(item.get("count", 0) or 0)
    return 0


def build_stats(matched_user: Dict[str, Any]) -> PlatformStatistics:
    ac_list = (matched_user.get("submitStats") or {}).get("acSubmissionNum") or []
    easy = _count_for(ac_list, "Easy")
    medium = _count_for(ac_list, "Medium")
    hard = _count_for(ac_list, "Hard")
    return PlatformStatistics(
        total_solved=easy + medium + hard,
        easy_solved=easy,
        medium_solved=medium,
        hard_solved=hard,
    )


class LeetCodeAdapter(PlatformAdapter):
    platform = "leetcode"

    async def fetch_user_data(self, username: str) -> Optional[PlatformStatistics]:
        payload = {"query": PROFILE_QUERY, "variables": {"username": username}}
        try:
            async with self.client(headers={"Content-Type": "application/json", "Referer": "https://leetcode.com"}) as client:
                resp = await client.post(GRAPHQL_URL, json=payload)
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("LeetCode API error for %s: %s", username, e)
            return None

        matched_user = (data.get("data") or {}).get("matchedUser") if isinstance(data, dict) else None
        if not matched_user:
            logger.info("LeetCode user %s not found", username)
            return None

        try:
            return build_stats(matched_user)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error("Unexpected LeetCode payload for %s: %s", username, e)
            return None
