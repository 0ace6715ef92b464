import logging
from typing import Dict, Iterable, Optional

from ..schemas.stats import PlatformStatistics
from .errors import UnsupportedPlatform
from .external import (
    PlatformAdapter,
    LeetCodeAdapter,
    CodeforcesAdapter,
    CodeChefAdapter,
    GeeksForGeeksAdapter,
)

logger = logging.getLogger(__name__)


def default_adapters() -> Iterable[PlatformAdapter]:
    return (LeetCodeAdapter(), CodeforcesAdapter(), CodeChefAdapter(), GeeksForGeeksAdapter())


class PlatformService:
    """Routes ``(platform, username)`` to the matching adapter."""

    def __init__(self, adapters: Optional[Iterable[PlatformAdapter]] = None):
        if adapters is None:
            adapters = default_adapters()
        self._adapters: Dict[str, PlatformAdapter] = {a.platform: a for a in adapters}

    def is_supported(self, platform: str) -> bool:
        return platform.lower() in self._adapters

    def capabilities(self) -> Dict[str, bool]:
        return {name: adapter.implemented for name, adapter in self._adapters.items()}

    def adapter_for(self, platform: str) -> PlatformAdapter:
        adapter = self._adapters.get(platform.lower())
        if adapter is None:
            raise UnsupportedPlatform(platform)
        return adapter

    async def fetch_user_data(self, platform: str, username: str) -> Optional[PlatformStatistics]:
        try:
            adapter = self.adapter_for(platform)
            return await adapter.fetch_user_data(username)
        except UnsupportedPlatform as e:
            logger.warning("Failed to fetch data for %s: %s", platform, e.reason)
            return None
        except Exception:
            logger.exception("Failed to fetch data for %s", platform)
            return None
