"""Request object fetcher port - Interface for retrieving referenced resources"""

from abc import ABC, abstractmethod
from typing import Any

from returns.result import Result

from wallet_selector.domain import FetchFailed


class RequestObjectFetcher(ABC):
    """
    Retrieves resources an authorization request points to by reference.

    Used for ``request_uri`` (JWT-secured authorization requests) and
    ``presentation_definition_uri``. Timeouts and transport are the
    implementation's concern.
    """

    @abstractmethod
    async def fetch_text(self, uri: str) -> Result[str, FetchFailed]:
        """
        Fetch a resource as text.

        Args:
            uri: Resource location

        Returns:
            Success(body) or Failure(FetchFailed)
        """
        pass

    @abstractmethod
    async def fetch_json(self, uri: str) -> Result[Any, FetchFailed]:
        """
        Fetch a resource and parse it as JSON.

        Returns:
            Success(parsed document) or Failure(FetchFailed)
        """
        pass
