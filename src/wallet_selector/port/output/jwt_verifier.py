"""JWT verifier port - Strategy for delegated signature verification"""

from abc import ABC, abstractmethod

from wallet_selector.domain import JwtVerificationOptions, JwtVerificationResult


class JwtVerifier(ABC):
    """
    Verifies a compact JWS on behalf of the broker.

    The broker never verifies signatures itself; it hands the token and
    the header hints to a strategy supplied by a wallet or by the host
    application.
    """

    @abstractmethod
    async def verify(self, jwt: str, options: JwtVerificationOptions) -> JwtVerificationResult:
        """
        Verify a token.

        Args:
            jwt: Compact serialized token
            options: Certificate / algorithm / kid taken from the token header

        Returns:
            JwtVerificationResult; failures are reported with valid=False
        """
        pass
