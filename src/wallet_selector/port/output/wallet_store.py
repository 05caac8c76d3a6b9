"""Wallet store port - Interface for wallet list, enable flag and usage statistics"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

from returns.result import Result

from wallet_selector.domain import WalletDescriptor


class WalletStoreError(Exception):
    """Raised when the wallet store cannot be read or written"""

    pass


class WalletStore(ABC):
    """
    Storage for configured wallets and selector settings.

    Owned by the surrounding application; the coordinator only reads
    wallets and the enable flag and records usage. Implementations can use
    in-memory storage, a settings file, browser storage, etc.
    """

    @abstractmethod
    async def get_wallets(self) -> Result[List[WalletDescriptor], WalletStoreError]:
        """
        Get all configured wallets, enabled or not, in display order.

        Returns:
            Success(list of wallets) or Failure(WalletStoreError)
        """
        pass

    @abstractmethod
    async def save_wallets(self, wallets: List[WalletDescriptor]) -> Result[None, WalletStoreError]:
        """Replace the wallet list"""
        pass

    @abstractmethod
    async def is_enabled(self) -> Result[bool, WalletStoreError]:
        """
        Read the global enable flag.

        When disabled every protocol-oriented request goes to the native path.
        """
        pass

    @abstractmethod
    async def set_enabled(self, enabled: bool) -> Result[None, WalletStoreError]:
        """Write the global enable flag"""
        pass

    @abstractmethod
    async def register_wallet(
        self, wallet: WalletDescriptor
    ) -> Result[Tuple[WalletDescriptor, bool], WalletStoreError]:
        """
        Add a self-registering wallet unless its endpoint is already known.

        Args:
            wallet: Wallet to add

        Returns:
            Success((stored wallet, already_registered)) or Failure(WalletStoreError)
        """
        pass

    @abstractmethod
    async def is_registered(self, endpoint: str) -> Result[bool, WalletStoreError]:
        """Check whether a wallet with this endpoint is configured"""
        pass

    @abstractmethod
    async def record_usage(self, action: str) -> Result[None, WalletStoreError]:
        """
        Record a usage statistic.

        Args:
            action: ``intercept`` or ``wallet:<wallet id>``
        """
        pass

    @abstractmethod
    async def get_stats(self) -> Result[Dict[str, Any], WalletStoreError]:
        """Get usage statistics ``{intercept_count, wallet_uses}``"""
        pass
