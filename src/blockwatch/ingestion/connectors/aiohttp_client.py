"""Concrete HTTP client implementation for async requests.

Wraps aiohttp behind IHttpClient abstraction.
"""

import json
import logging
from typing import Any

import aiohttp

from blockwatch.config.value_objects import HttpClientConfig
from blockwatch.ingestion.ports.http import (
    HttpResponse,
    IHttpClient,
)

logger = logging.getLogger(__name__)


class AiohttpClient(IHttpClient):
    """HTTP client implementation using aiohttp."""

    def __init__(self, config: HttpClientConfig | None = None):
        """Initialize HTTP client.

        Args:
            config: HTTP client configuration
        """
        self.config = config or HttpClientConfig()
        self._session: aiohttp.ClientSession | None = None

    def _timeout(self, total: float | None = None) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=total or self.config.timeout,
            sock_connect=self.config.connect_timeout,
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout(),
                headers={
                    "Accept": "application/json",
                    "User-Agent": self.config.user_agent,
                },
            )
        return self._session

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute GET request.

        2xx bodies are JSON-decoded when possible; anything else is
        returned as text so callers can log it.

        Raises:
            aiohttp.ClientError: On connection errors
            asyncio.TimeoutError: On connect or total timeout
        """
        session = await self._get_session()

        async with session.get(
            url,
            params=params,
            headers=headers,
            timeout=self._timeout(timeout),
        ) as resp:
            raw = await resp.read()
            try:
                text = raw.decode(resp.charset or "utf-8")
                decoded = True
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Undecodable body from {resp.url}")
                text = raw.decode("utf-8", errors="replace")
                decoded = False

            body: Any = text
            if decoded and 200 <= resp.status < 300:
                try:
                    body = json.loads(text)
                except ValueError:
                    logger.debug(f"Non-JSON body from {resp.url}")
            return HttpResponse(
                status_code=resp.status,
                body=body,
                headers=dict(resp.headers),
                url=str(resp.url),
            )

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
