"""Wallet invocation port - Interface for the post-selection wallet round trip"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from wallet_selector.domain import InvocationOutcome, WalletDescriptor


class WalletInvocationChannel(ABC):
    """
    Delivers a formatted request to the chosen wallet and waits for its answer.

    The coordinator bounds the wait with the wallet response timeout; the
    channel itself may wait indefinitely.
    """

    @abstractmethod
    async def invoke(
        self, correlation_id: str, wallet: WalletDescriptor, formatted_request: Dict[str, Any]
    ) -> InvocationOutcome:
        """
        Hand the request to the wallet.

        Args:
            correlation_id: Request being served
            wallet: Chosen wallet
            formatted_request: Output of the plugin's ``format_for_wallet``

        Returns:
            WalletResponded, WalletNativeFallback or WalletCancelled
        """
        pass
