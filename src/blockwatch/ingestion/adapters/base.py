"""Base class for upstream provider adapters.

Failures never cross this boundary: non-2xx status, transport errors,
timeouts and undecodable bodies all come back as None and are only
visible in the logs.
"""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

import aiohttp

from blockwatch.infrastructure.observability import get_ingestion_logger
from blockwatch.ingestion.decoding import PARSE_ERRORS
from blockwatch.ingestion.ports.http import IHttpClient

T = TypeVar("T")


class UpstreamAdapter:
    """Shared request/decode plumbing for one upstream provider."""

    provider: str = "upstream"

    def __init__(self, http_client: IHttpClient, base_url: str):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.log = get_ingestion_logger(f"{self.provider}-client", provider=self.provider)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET a JSON document.

        Returns:
            Decoded JSON body, or None on any failure
        """
        url = self._url(path)
        try:
            response = await self.http_client.get(url, params=params)
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            self.log.warning("upstream_request_timeout", url=url)
            return None
        except aiohttp.ClientError as e:
            self.log.warning("upstream_request_failed", url=url, error=str(e))
            return None
        except UnicodeDecodeError as e:
            self.log.warning("upstream_undecodable_body", url=url, error=str(e))
            return None

        if not response.ok:
            self.log.warning(
                "upstream_bad_status", url=url, status=response.status_code
            )
            return None

        if isinstance(response.body, str):
            self.log.warning("upstream_non_json_body", url=url)
            return None

        self.log.debug("upstream_request_ok", url=url, status=response.status_code)
        return response.body

    def _decode(self, endpoint: str, payload: Any, mapper: Callable[[Any], T]) -> T | None:
        """Apply a mapper; a schema mismatch is logged and becomes None."""
        if payload is None:
            return None
        try:
            return mapper(payload)
        except PARSE_ERRORS as e:
            self.log.warning("upstream_decode_failed", endpoint=endpoint, error=str(e))
            return None
