"""JWT verification delegation registry

Wallets (or the host application) register a callback that verifies JWTs on
their behalf. The broker looks the callback up by the wallet endpoint when it
resolves a request object for that wallet.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from wallet_selector.domain import (
    JwtVerificationOptions,
    JwtVerificationResult,
    is_absolute_http_url,
    parse_verifier_result,
)
from wallet_selector.port.output import JwtVerifier

logger = logging.getLogger(__name__)

VerifierResult = Union[JwtVerificationResult, Dict[str, Any]]

VerifierCallback = Callable[[str, Dict[str, Any]], Union[VerifierResult, Awaitable[VerifierResult]]]


async def call_verifier(callback: VerifierCallback, jwt: str, options: JwtVerificationOptions) -> JwtVerificationResult:
    """
    Invoke a verification callback and normalize its outcome.

    The callback receives the token and ``{certificate, algorithm, kid}``.
    It may be sync or async. Exceptions and malformed return values are
    reported as ``valid=False``; this function never raises.
    """
    try:
        raw = callback(jwt, options.as_dict())
        if inspect.isawaitable(raw):
            raw = await raw
        return parse_verifier_result(raw)
    except Exception as e:
        logger.warning("JWT verifier raised: %s", e)
        return JwtVerificationResult.failure(str(e))


def _strategy_callback(verifier: JwtVerifier) -> VerifierCallback:
    async def callback(jwt: str, options: Dict[str, Any]) -> JwtVerificationResult:
        return await verifier.verify(jwt, JwtVerificationOptions(**options))

    return callback


class CallbackVerifier(JwtVerifier):
    """JwtVerifier strategy backed by a registered callback"""

    def __init__(self, agent_id: str, callback: VerifierCallback):
        self.agent_id = agent_id
        self.callback = callback

    async def verify(self, jwt: str, options: JwtVerificationOptions) -> JwtVerificationResult:
        return await call_verifier(self.callback, jwt, options)


class JwtVerifierRegistry:
    """Verification callbacks keyed by wallet endpoint URL"""

    def __init__(self) -> None:
        self._verifiers: Dict[str, VerifierCallback] = {}

    def register_verifier(self, agent_id: str, callback: Union[VerifierCallback, JwtVerifier]) -> None:
        """
        Register (or replace) the verifier for a wallet.

        Args:
            agent_id: Wallet endpoint URL
            callback: ``(jwt, options) -> {valid, payload?, error?}``, sync or
                async, or a JwtVerifier strategy

        Raises:
            TypeError: callback is not callable
            ValueError: agent_id is not an absolute http(s) URL
        """
        if isinstance(callback, JwtVerifier):
            callback = _strategy_callback(callback)
        if not callable(callback):
            raise TypeError("Verifier must be a function")
        if not isinstance(agent_id, str) or not is_absolute_http_url(agent_id):
            raise ValueError(f"Invalid wallet URL: {agent_id}")

        if agent_id in self._verifiers:
            logger.info("Replacing JWT verifier for %s", agent_id)
        self._verifiers[agent_id] = callback
        logger.info("Registered JWT verifier for %s", agent_id)

    def unregister_verifier(self, agent_id: str) -> bool:
        removed = self._verifiers.pop(agent_id, None) is not None
        if removed:
            logger.info("Unregistered JWT verifier for %s", agent_id)
        return removed

    def list_verifiers(self) -> List[str]:
        return list(self._verifiers)

    def has_verifier(self, agent_id: str) -> bool:
        return agent_id in self._verifiers

    async def invoke(
        self, agent_id: str, jwt: str, options: JwtVerificationOptions
    ) -> Optional[JwtVerificationResult]:
        """
        Verify ``jwt`` with the verifier registered for ``agent_id``.

        Returns:
            None when no verifier is registered (the caller proceeds
            unverified), otherwise the normalized result
        """
        callback = self._verifiers.get(agent_id)
        if callback is None:
            return None
        return await call_verifier(callback, jwt, options)

    def strategy_for(self, agent_id: str) -> Optional[JwtVerifier]:
        """The registered verifier for ``agent_id`` as a JwtVerifier, if any"""
        callback = self._verifiers.get(agent_id)
        if callback is None:
            return None
        return CallbackVerifier(agent_id, callback)
