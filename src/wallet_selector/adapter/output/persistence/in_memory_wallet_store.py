"""In-memory implementation of WalletStore"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Tuple

from returns.result import Failure, Result, Success

from wallet_selector.domain import WalletDescriptor
from wallet_selector.port.output import WalletStore, WalletStoreError

WALLET_USAGE_PREFIX = "wallet:"


class InMemoryWalletStore(WalletStore):
    """
    In-memory implementation of WalletStore.

    Keeps the wallet list in insertion order, the global enable flag and the
    usage statistics:
    - intercept_count: Number of intercepted requests
    - wallet_uses: Number of times each wallet was chosen, by wallet id

    Safe for concurrent async access using asyncio.Lock.
    """

    def __init__(self, wallets: Optional[Iterable[WalletDescriptor]] = None, enabled: bool = True):
        """
        Initialize the store.

        Args:
            wallets: Initial wallet list
            enabled: Initial value of the enable flag
        """
        self._wallets: List[WalletDescriptor] = list(wallets or [])
        self._enabled = enabled
        self._intercept_count = 0
        self._wallet_uses: Dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def get_wallets(self) -> Result[List[WalletDescriptor], WalletStoreError]:
        try:
            async with self._lock:
                return Success(list(self._wallets))
        except Exception as e:
            return Failure(WalletStoreError(str(e)))

    async def save_wallets(self, wallets: List[WalletDescriptor]) -> Result[None, WalletStoreError]:
        try:
            async with self._lock:
                self._wallets = list(wallets)
            return Success(None)
        except Exception as e:
            return Failure(WalletStoreError(str(e)))

    async def is_enabled(self) -> Result[bool, WalletStoreError]:
        return Success(self._enabled)

    async def set_enabled(self, enabled: bool) -> Result[None, WalletStoreError]:
        self._enabled = enabled
        return Success(None)

    async def register_wallet(
        self, wallet: WalletDescriptor
    ) -> Result[Tuple[WalletDescriptor, bool], WalletStoreError]:
        """
        Add a self-registering wallet.

        Wallets are de-duplicated by endpoint; registering a known endpoint
        returns the stored wallet with ``already_registered=True``.
        """
        try:
            async with self._lock:
                for existing in self._wallets:
                    if existing.endpoint == wallet.endpoint:
                        return Success((existing, True))
                if any(existing.id == wallet.id for existing in self._wallets):
                    return Failure(WalletStoreError(f"Wallet id already in use: {wallet.id}"))
                self._wallets.append(wallet)
            return Success((wallet, False))
        except Exception as e:
            return Failure(WalletStoreError(str(e)))

    async def is_registered(self, endpoint: str) -> Result[bool, WalletStoreError]:
        try:
            async with self._lock:
                return Success(any(wallet.endpoint == endpoint for wallet in self._wallets))
        except Exception as e:
            return Failure(WalletStoreError(str(e)))

    async def record_usage(self, action: str) -> Result[None, WalletStoreError]:
        """
        Record ``intercept`` or ``wallet:<id>``.

        Unknown actions are ignored.
        """
        try:
            async with self._lock:
                if action == "intercept":
                    self._intercept_count += 1
                elif action.startswith(WALLET_USAGE_PREFIX):
                    wallet_id = action[len(WALLET_USAGE_PREFIX):]
                    self._wallet_uses[wallet_id] = self._wallet_uses.get(wallet_id, 0) + 1
            return Success(None)
        except Exception as e:
            return Failure(WalletStoreError(str(e)))

    async def get_stats(self) -> Result[Dict[str, Any], WalletStoreError]:
        try:
            async with self._lock:
                return Success({"intercept_count": self._intercept_count, "wallet_uses": dict(self._wallet_uses)})
        except Exception as e:
            return Failure(WalletStoreError(str(e)))

    async def clear(self) -> Result[None, WalletStoreError]:
        """
        Remove all wallets and reset statistics (useful for testing).

        Returns:
            Success(None) or Failure(WalletStoreError)
        """
        try:
            async with self._lock:
                self._wallets.clear()
                self._intercept_count = 0
                self._wallet_uses.clear()
            return Success(None)
        except Exception as e:
            return Failure(WalletStoreError(str(e)))
