"""HTTP client service — managed httpx.AsyncClient with connection pooling."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

# Xtream panels frequently reject unknown agents; present as a common player
HEADERS = {
    "User-Agent": "IPTVSmartersPro",
    "Accept": "application/json, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}


class HttpClientService:
    """Manages a shared httpx.AsyncClient with connection pooling.

    ``transport`` is passed through to the client so tests can plug in an
    ``httpx.MockTransport``.
    """

    def __init__(self, timeout: float = 60.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout
        self._transport = transport

    async def get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=HEADERS,
                timeout=httpx.Timeout(self._timeout, connect=15.0),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.info("Global HTTP client closed")
