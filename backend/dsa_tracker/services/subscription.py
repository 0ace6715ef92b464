from typing import Any, Dict

from ..config import settings
from ..models.user import User
from .errors import LimitExceeded

UNLIMITED = -1


def max_platforms_for(subscription_type: str) -> int:
    if (subscription_type or "FREE").upper() == "PRO":
        return settings.PRO_PLAN_MAX_PLATFORMS
    return settings.FREE_PLAN_MAX_PLATFORMS


def get_platform_limits(user: User) -> Dict[str, Any]:
    limit = max_platforms_for(user.subscription_type)
    linked = user.platforms_linked or 0
    can_link = limit == UNLIMITED or linked < limit
    remaining = UNLIMITED if limit == UNLIMITED else max(0, limit - linked)
    return {
        "maxPlatforms": limit,
        "platformsLinked": linked,
        "platformsRemaining": remaining,
        "canLinkPlatform": can_link,
        "subscriptionType": user.subscription_type or "FREE",
    }


def check_platform_limit(user: User) -> None:
    limits = get_platform_limits(user)
    if not limits["canLinkPlatform"]:
        raise LimitExceeded(current=limits["platformsLinked"], limit=limits["maxPlatforms"])
