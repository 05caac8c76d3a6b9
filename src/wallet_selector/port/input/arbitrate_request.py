"""Arbitrate request use case - Route a brokered request to a wallet or back to native"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from wallet_selector.domain import Envelope, PreparedRequest


class ArbitrateRequest(ABC):
    """
    Use case: decide how one brokered credential request is served.

    The decision is always reported back as a single credentials_response
    envelope for the request's correlation id.
    """

    @abstractmethod
    async def execute(
        self, correlation_id: str, requests: Sequence[PreparedRequest], options: Mapping[str, Any]
    ) -> Envelope:
        """
        Arbitrate a request.

        Args:
            correlation_id: Request being arbitrated
            requests: Prepared sub-requests, in submission order
            options: Caller's original options

        Returns:
            The credentials_response envelope to send back
        """
        pass
