"""Persistence adapters"""

from wallet_selector.adapter.output.persistence.in_memory_wallet_store import InMemoryWalletStore

__all__ = ["InMemoryWalletStore"]
