from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Union

RATING_BANDS = (
    "below1000",
    "range1000to1199",
    "range1200to1399",
    "range1400to1599",
    "range1600to1799",
    "range1800to1999",
    "range2000to2199",
    "range2200to2399",
    "range2400to2599",
    "range2600to2799",
    "range2800to2999",
    "above3000",
    "unrated",
)


def empty_rating_bands() -> Dict[str, int]:
    return {band: 0 for band in RATING_BANDS}


class PlatformStatistics(BaseModel):
    """
    Normalized statistics produced by every platform adapter.

    Counts default to 0; everything else is omitted when the platform does not
    expose it. Unknown keys are kept so platform-specific extras survive a
    round trip through storage.
    """
    total_solved: int = 0
    easy_solved: int = 0
    medium_solved: int = 0
    hard_solved: int = 0

    rating: Optional[int] = None
    max_rating: Optional[int] = None
    rank: Optional[Union[int, str]] = None
    title: Optional[str] = None
    contests: Optional[int] = None
    last_three_ranks: Optional[List[int]] = None
    rating_change: Optional[int] = None
    friends: Optional[int] = None
    contribution: Optional[int] = None
    rating_wise_count: Optional[Dict[str, int]] = None

    platform: Optional[str] = None
    country_rank: Optional[int] = None
    stars: Optional[str] = None
    division: Optional[str] = None
    coding_score: Optional[int] = None

    placeholder: Optional[bool] = None
    scrape_failed: Optional[bool] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @classmethod
    def zero(cls, platform: str, **extra: Any) -> "PlatformStatistics":
        return cls(platform=platform, **extra)

    def to_record(self) -> Dict[str, Any]:
        """Camel-cased dict for JSON storage, with unset optionals dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)
