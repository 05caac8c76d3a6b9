"""API routes"""

from wallet_selector.api.routes import credentials, selections, wallet, wallets

__all__ = ["credentials", "selections", "wallet", "wallets"]
