"""httpx implementation of RequestObjectFetcher"""

import logging
from typing import Any, Optional

import httpx
from returns.result import Failure, Result, Success

from wallet_selector.domain import FetchFailed
from wallet_selector.port.output import RequestObjectFetcher

logger = logging.getLogger(__name__)


class HttpxRequestObjectFetcher(RequestObjectFetcher):
    """
    Fetches request objects and presentation definitions over HTTP(S).

    A shared ``httpx.AsyncClient`` may be injected (and is then owned by the
    caller); otherwise one client is created per fetch.
    """

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self.client = client

    async def fetch_text(self, uri: str) -> Result[str, FetchFailed]:
        result = await self._get(uri)
        if isinstance(result, Failure):
            return result
        return Success(result.unwrap().text)

    async def fetch_json(self, uri: str) -> Result[Any, FetchFailed]:
        result = await self._get(uri)
        if isinstance(result, Failure):
            return result
        try:
            return Success(result.unwrap().json())
        except ValueError as e:
            return Failure(FetchFailed(uri, f"invalid JSON: {e}"))

    async def _get(self, uri: str) -> Result[httpx.Response, FetchFailed]:
        logger.debug("Fetching %s", uri)
        try:
            if self.client is not None:
                response = await self.client.get(uri, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(uri)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return Failure(FetchFailed(uri, f"HTTP {e.response.status_code}"))
        except httpx.HTTPError as e:
            logger.warning("Fetching %s failed: %s", uri, e)
            return Failure(FetchFailed(uri, str(e) or type(e).__name__))
        return Success(response)
