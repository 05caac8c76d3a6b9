"""Selection surface answered from outside, e.g. by an HTTP client"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from returns.result import Failure, Result, Success

from wallet_selector.domain import (
    NativeChosen,
    PreparedRequest,
    SelectionCancelled,
    SelectionOutcome,
    WalletChosen,
    WalletDescriptor,
)
from wallet_selector.port.output import SelectionSurface
from wallet_selector.adapter.output.deferred.pending import DeferredError, NotPending, PendingFutures

logger = logging.getLogger(__name__)


class UnknownWallet(DeferredError):
    """The chosen wallet was not offered for this request"""

    def __init__(self, correlation_id: str, wallet_id: str):
        self.wallet_id = wallet_id
        super().__init__(f"Wallet {wallet_id} was not offered for {correlation_id}")


@dataclass(frozen=True)
class PendingSelection:
    """A selection waiting for the user"""

    correlation_id: str
    wallets: Tuple[WalletDescriptor, ...]
    requests: Tuple[PreparedRequest, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_id": self.correlation_id,
            "wallets": [wallet.model_dump(mode="json") for wallet in self.wallets],
            "protocols": [request.protocol for request in self.requests],
        }


class DeferredSelectionSurface(SelectionSurface):
    """
    Parks each selection until someone answers it.

    ``select`` waits until ``choose_wallet``, ``choose_native`` or
    ``cancel`` is called for the same correlation id.
    """

    def __init__(self) -> None:
        self._pending: PendingFutures[PendingSelection, SelectionOutcome] = PendingFutures()

    async def select(
        self,
        correlation_id: str,
        wallets: Sequence[WalletDescriptor],
        requests: Sequence[PreparedRequest],
    ) -> SelectionOutcome:
        selection = PendingSelection(correlation_id, tuple(wallets), tuple(requests))
        logger.info("Waiting for wallet selection for %s (%d wallet(s))", correlation_id, len(selection.wallets))
        return await self._pending.wait(correlation_id, selection)

    def get_pending(self, correlation_id: str) -> Optional[PendingSelection]:
        return self._pending.details(correlation_id)

    def pending(self) -> List[str]:
        return self._pending.keys()

    def choose_wallet(self, correlation_id: str, wallet_id: str) -> Result[WalletChosen, DeferredError]:
        """
        Answer with one of the offered wallets.

        Returns:
            Success(WalletChosen) or Failure(NotPending | UnknownWallet)
        """
        selection = self._pending.details(correlation_id)
        if selection is None:
            return Failure(NotPending(correlation_id))
        wallet = next((wallet for wallet in selection.wallets if wallet.id == wallet_id), None)
        if wallet is None:
            return Failure(UnknownWallet(correlation_id, wallet_id))

        matched = next((request.protocol for request in selection.requests if wallet.supports(request.protocol)), None)
        outcome = WalletChosen(wallet=wallet, matched_protocol=matched)
        if not self._pending.resolve(correlation_id, outcome):
            return Failure(NotPending(correlation_id))
        return Success(outcome)

    def choose_native(self, correlation_id: str) -> Result[NativeChosen, DeferredError]:
        return self._answer(correlation_id, NativeChosen())

    def cancel(self, correlation_id: str) -> Result[SelectionCancelled, DeferredError]:
        return self._answer(correlation_id, SelectionCancelled())

    def _answer(self, correlation_id: str, outcome: Any) -> Result[Any, DeferredError]:
        if not self._pending.resolve(correlation_id, outcome):
            return Failure(NotPending(correlation_id))
        return Success(outcome)
