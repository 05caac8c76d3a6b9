"""Adapter layer - Infrastructure implementations"""

from wallet_selector.adapter.output import (
    DeferredSelectionSurface,
    DeferredWalletInvocationChannel,
    DeferToCallerNativePath,
    HttpxRequestObjectFetcher,
    InMemoryWalletStore,
    JoserfcJwtVerifier,
)

__all__ = [
    "InMemoryWalletStore",
    "DeferredSelectionSurface",
    "DeferredWalletInvocationChannel",
    "HttpxRequestObjectFetcher",
    "JoserfcJwtVerifier",
    "DeferToCallerNativePath",
]
