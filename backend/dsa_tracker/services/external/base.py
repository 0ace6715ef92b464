from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ...config import settings
from ...schemas.stats import PlatformStatistics

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) dsa-tracker",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class PlatformAdapter:
    """
    One external platform. ``fetch_user_data`` must never raise: failures come
    back as ``None`` (or a zero-valued record where the platform says so).
    """

    platform: str = ""
    implemented: bool = True

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: Optional[float] = None):
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.PLATFORM_REQUEST_TIMEOUT

    def client(self, **kwargs: Any) -> httpx.AsyncClient:
        headers = dict(HEADERS)
        headers.update(kwargs.pop("headers", {}))
        return httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers,
            transport=self._transport,
            follow_redirects=True,
            **kwargs,
        )

    async def _fetch_html(self, url: str, **kwargs: Any) -> str:
        async with self.client(**kwargs) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.text

    async def fetch_user_data(self, username: str) -> Optional[PlatformStatistics]:
        raise NotImplementedError


async def get_json(client: httpx.AsyncClient, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    resp = await client.get(url, params=params)
    # Some APIs (Codeforces) report errors in the body with a 4xx status
    if resp.status_code >= 500:
        resp.raise_for_status()
    return resp.json()
