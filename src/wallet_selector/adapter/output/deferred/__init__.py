"""Deferred adapters - Steps answered from outside the broker"""

from wallet_selector.adapter.output.deferred.pending import DeferredError, NotPending, PendingFutures
from wallet_selector.adapter.output.deferred.selection_surface import (
    DeferredSelectionSurface,
    PendingSelection,
    UnknownWallet,
)
from wallet_selector.adapter.output.deferred.wallet_invocation import (
    DeferredWalletInvocationChannel,
    OriginMismatch,
    PendingInvocation,
)

__all__ = [
    "DeferredError",
    "NotPending",
    "PendingFutures",
    "DeferredSelectionSurface",
    "PendingSelection",
    "UnknownWallet",
    "DeferredWalletInvocationChannel",
    "OriginMismatch",
    "PendingInvocation",
]
