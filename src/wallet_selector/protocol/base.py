"""Protocol plugin contract"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from wallet_selector.port.output import JwtVerifier


class ProtocolPlugin(ABC):
    """
    Validates and normalizes the traffic of one credential-presentation protocol.

    Plugins are stateless and registered once at startup. Validation errors
    are raised from ``prepare_request`` / ``validate_response`` and are
    subclasses of ``WalletSelectorError``.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Protocol identifier, e.g. ``openid4vp``"""
        pass

    @abstractmethod
    def prepare_request(self, data: Any) -> Dict[str, Any]:
        """
        Validate and normalize a caller's request payload.

        Args:
            data: Payload as submitted by the caller

        Returns:
            A new normalized payload; ``data`` is never mutated
        """
        pass

    @abstractmethod
    def validate_response(self, response: Any) -> Any:
        """
        Validate a wallet's response payload.

        Returns:
            The validated response
        """
        pass

    def format_for_wallet(self, request: Dict[str, Any], wallet_endpoint: str) -> Dict[str, Any]:
        """Shape a normalized request for delivery to ``wallet_endpoint``"""
        return {"protocol": self.id, "wallet_url": wallet_endpoint, "request_data": request}

    async def resolve_request(
        self, request: Dict[str, Any], verifier: Optional[JwtVerifier] = None
    ) -> Dict[str, Any]:
        """
        Resolve anything the request carries by reference.

        Called once a wallet has been chosen. Plugins without by-reference
        parameters return the request unchanged.
        """
        return request
