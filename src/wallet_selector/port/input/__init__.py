"""Input ports - Use case interfaces"""

from wallet_selector.port.input.request_credential import RequestCredential
from wallet_selector.port.input.arbitrate_request import ArbitrateRequest

__all__ = [
    "RequestCredential",
    "ArbitrateRequest",
]
