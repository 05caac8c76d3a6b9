"""Selection surface port - Interface for letting the user pick a wallet"""

from abc import ABC, abstractmethod
from typing import Sequence

from wallet_selector.domain import PreparedRequest, SelectionOutcome, WalletDescriptor


class SelectionSurface(ABC):
    """
    Presents matching wallets to the user and reports the choice.

    The wait is driven by a human and is not bounded by the broker's
    request window.
    """

    @abstractmethod
    async def select(
        self,
        correlation_id: str,
        wallets: Sequence[WalletDescriptor],
        requests: Sequence[PreparedRequest],
    ) -> SelectionOutcome:
        """
        Ask the user to choose.

        Args:
            correlation_id: Request being arbitrated
            wallets: Enabled wallets sharing a protocol with the request
            requests: Prepared sub-requests, in submission order

        Returns:
            WalletChosen, NativeChosen or SelectionCancelled
        """
        pass
