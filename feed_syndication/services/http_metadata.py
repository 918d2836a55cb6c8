"""
HTTP metadata lookup.
Fetches Content-Length for hero enclosures with a HEAD request.

Best effort: failures, timeouts and an open circuit all yield "" so the
feed is never held up by an image host.
"""
import logging
from typing import Optional

import httpx

from feed_syndication.core.cache import TTLCache
from feed_syndication.core.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


class HttpContentLengthLookup:
    """
    ContentLengthLookup backed by httpx.

    Successful answers (including "no header") are cached per URL; failures
    are not, so the next feed request retries.
    """

    def __init__(
        self,
        timeout_sec: float = 2.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        cache: Optional[TTLCache[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            timeout_sec: Total budget per HEAD request
            circuit_breaker: Breaker shared across requests
            cache: Result cache shared across requests
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._timeout = httpx.Timeout(timeout_sec)
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            name="content_length_lookup",
            failure_threshold=5,
            recovery_timeout_sec=30,
        )
        self._cache = cache if cache is not None else TTLCache[str](ttl_seconds=3600)
        self._transport = transport

    async def get_content_length(self, url: str) -> str:
        """Content-Length of `url`, or "" when unavailable."""
        cached = self._cache.get(url)
        if cached is not None:
            return cached

        length = await self._circuit_breaker.call(
            func=lambda: self._head(url),
            fallback=lambda: None,
        )
        if length is None:
            return ""

        self._cache.set(url, length)
        return length

    async def _head(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.head(url)
            response.raise_for_status()
            return response.headers.get("content-length", "")
