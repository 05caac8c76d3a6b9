"""Output ports - Interfaces for external dependencies"""

from wallet_selector.port.output.wallet_store import WalletStore, WalletStoreError
from wallet_selector.port.output.selection_surface import SelectionSurface
from wallet_selector.port.output.wallet_invocation import WalletInvocationChannel
from wallet_selector.port.output.request_fetcher import RequestObjectFetcher
from wallet_selector.port.output.native_credentials import NativeCredentialPath
from wallet_selector.port.output.jwt_verifier import JwtVerifier

__all__ = [
    # Wallet Store
    "WalletStore",
    "WalletStoreError",
    # Selection Surface
    "SelectionSurface",
    # Wallet Invocation
    "WalletInvocationChannel",
    # Request Object Fetcher
    "RequestObjectFetcher",
    # Native Credential Path
    "NativeCredentialPath",
    # JWT Verifier
    "JwtVerifier",
]
