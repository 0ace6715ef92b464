import asyncio
import json

import httpx

from dsa_tracker.services.external.leetcode import GRAPHQL_URL, LeetCodeAdapter, build_stats


def _profile(easy, medium, hard):
    return {
        "data": {
            "matchedUser": {
                "username": "alice",
                "submitStats": {
                    "acSubmissionNum": [
                        {"difficulty": "All", "count": easy + medium + hard},
                        {"difficulty": "Easy", "count": easy},
                        {"difficulty": "Medium", "count": medium},
                        {"difficulty": "Hard", "count": hard},
                    ]
                },
            }
        }
    }


def _adapter(handler):
    return LeetCodeAdapter(transport=httpx.MockTransport(handler))


def test_build_stats_sums_difficulties():
    stats = build_stats(_profile(10, 5, 1)["data"]["matchedUser"])
    assert (stats.total_solved, stats.easy_solved, stats.medium_solved, stats.hard_solved) == (16, 10, 5, 1)


def test_build_stats_missing_difficulty_counts_zero():
    stats = build_stats({"submitStats": {"acSubmissionNum": [{"difficulty": "Easy", "count": 4}]}})
    assert stats.total_solved == 4
    assert stats.hard_solved == 0


def test_fetch_posts_graphql_query():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_profile(10, 5, 1))

    stats = asyncio.run(_adapter(handler).fetch_user_data("alice"))

    assert seen["url"] == GRAPHQL_URL
    assert seen["body"]["variables"] == {"username": "alice"}
    assert "matchedUser" in seen["body"]["query"]
    assert stats.to_record() == {"totalSolved": 16, "easySolved": 10, "mediumSolved": 5, "hardSolved": 1}


def test_unknown_user_returns_none():
    def handler(request):
        return httpx.Response(200, json={"data": {"matchedUser": None}})

    assert asyncio.run(_adapter(handler).fetch_user_data("ghost")) is None


def test_invalid_json_returns_none():
    def handler(request):
        return httpx.Response(200, text="<html>rate limited</html>")

    assert asyncio.run(_adapter(handler).fetch_user_data("alice")) is None


def test_network_error_returns_none():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    assert asyncio.run(_adapter(handler).fetch_user_data("alice")) is None
