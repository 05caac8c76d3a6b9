"""Wallet invocation channel answered by the wallet posting its response back"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from returns.result import Failure, Result, Success

from wallet_selector.domain import (
    InvocationOutcome,
    WalletCancelled,
    WalletDescriptor,
    WalletNativeFallback,
    WalletResponded,
    url_origin,
)
from wallet_selector.port.output import WalletInvocationChannel
from wallet_selector.adapter.output.deferred.pending import DeferredError, NotPending, PendingFutures

logger = logging.getLogger(__name__)


class OriginMismatch(DeferredError):
    """A response arrived from somewhere other than the chosen wallet"""

    def __init__(self, correlation_id: str, origin: str):
        self.origin = origin
        super().__init__(f"Response for {correlation_id} from unexpected origin {origin}")


@dataclass(frozen=True)
class PendingInvocation:
    """A wallet round trip in progress"""

    correlation_id: str
    wallet: WalletDescriptor
    formatted_request: Dict[str, Any]

    @property
    def authorization_url(self) -> Optional[str]:
        return self.formatted_request.get("authorization_url")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_id": self.correlation_id,
            "wallet_id": self.wallet.id,
            "protocol": self.formatted_request.get("protocol"),
            "authorization_url": self.authorization_url,
        }


class DeferredWalletInvocationChannel(WalletInvocationChannel):
    """
    Publishes the formatted request and waits for the wallet to answer.

    The wallet (or whoever relays for it) answers with ``deliver_response``,
    ``fallback_to_native`` or ``cancel``. Responses carrying an origin must
    come from the chosen wallet's origin.
    """

    def __init__(self) -> None:
        self._pending: PendingFutures[PendingInvocation, InvocationOutcome] = PendingFutures()

    async def invoke(
        self, correlation_id: str, wallet: WalletDescriptor, formatted_request: Dict[str, Any]
    ) -> InvocationOutcome:
        invocation = PendingInvocation(correlation_id, wallet, formatted_request)
        logger.info("Opening wallet %s: %s", wallet.name, invocation.authorization_url)
        return await self._pending.wait(correlation_id, invocation)

    def get_pending(self, correlation_id: str) -> Optional[PendingInvocation]:
        return self._pending.details(correlation_id)

    def pending(self) -> List[str]:
        return self._pending.keys()

    def deliver_response(
        self, correlation_id: str, response: Any, origin: Optional[str] = None
    ) -> Result[WalletResponded, DeferredError]:
        """
        Hand the wallet's response to the waiting coordinator.

        Args:
            correlation_id: Request being answered
            response: Protocol response payload
            origin: Origin the response came from; checked when given

        Returns:
            Success(WalletResponded) or Failure(NotPending | OriginMismatch)
        """
        invocation = self._pending.details(correlation_id)
        if invocation is None:
            return Failure(NotPending(correlation_id))
        if origin is not None and url_origin(origin) != invocation.wallet.origin:
            logger.warning("Ignoring response for %s from %s", correlation_id, origin)
            return Failure(OriginMismatch(correlation_id, origin))

        outcome = WalletResponded(payload=response, protocol=invocation.formatted_request.get("protocol"))
        if not self._pending.resolve(correlation_id, outcome):
            return Failure(NotPending(correlation_id))
        return Success(outcome)

    def fallback_to_native(self, correlation_id: str) -> Result[WalletNativeFallback, DeferredError]:
        outcome = WalletNativeFallback()
        if not self._pending.resolve(correlation_id, outcome):
            return Failure(NotPending(correlation_id))
        return Success(outcome)

    def cancel(self, correlation_id: str) -> Result[WalletCancelled, DeferredError]:
        outcome = WalletCancelled()
        if not self._pending.resolve(correlation_id, outcome):
            return Failure(NotPending(correlation_id))
        return Success(outcome)
