"""Request credential use case - The caller-facing entry point"""

from abc import ABC, abstractmethod
from typing import Any


class RequestCredential(ABC):
    """
    Use case: obtain a credential for an untrusted caller.

    Protocol-oriented requests are brokered to a user-chosen wallet; any
    other request goes to the native credential path unchanged.
    """

    @abstractmethod
    async def get(self, options: Any) -> Any:
        """
        Execute a credential request.

        Args:
            options: Caller's request options, e.g.
                ``{"digital": {"requests": [{"protocol": ..., "data": ...}]}}``

        Returns:
            A DigitalCredential, a raw wallet response, or whatever the
            native path returns

        Raises:
            Timeout: No decision within the request window
            UserCancelled: Selection or wallet round trip cancelled
            RequestAborted: The coordinator reported an error
            InvalidResponse: The wallet response failed validation
        """
        pass
