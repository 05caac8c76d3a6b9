"""Output adapters - Infrastructure implementations of output ports"""

from wallet_selector.adapter.output.persistence import InMemoryWalletStore
from wallet_selector.adapter.output.deferred import DeferredSelectionSurface, DeferredWalletInvocationChannel
from wallet_selector.adapter.output.http import HttpxRequestObjectFetcher
from wallet_selector.adapter.output.jose import JoserfcJwtVerifier
from wallet_selector.adapter.output.native import DeferToCallerNativePath

__all__ = [
    "InMemoryWalletStore",
    "DeferredSelectionSurface",
    "DeferredWalletInvocationChannel",
    "HttpxRequestObjectFetcher",
    "JoserfcJwtVerifier",
    "DeferToCallerNativePath",
]
