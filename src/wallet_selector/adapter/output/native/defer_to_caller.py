"""Native credential path for deployments without a native credential API"""

from typing import Any, Iterable, Optional

from wallet_selector.port.output import NativeCredentialPath


class DeferToCallerNativePath(NativeCredentialPath):
    """
    Hands the request back to the caller.

    Used when the broker runs as a service: the caller receives
    ``{"use_native": True, "options": ...}`` and performs the request with
    its own credential API.
    """

    def __init__(self, allowed_protocols: Optional[Iterable[str]] = None):
        self.allowed_protocols = frozenset(allowed_protocols or ())

    async def get(self, options: Any) -> Any:
        return {"use_native": True, "options": options}

    def allows_protocol(self, protocol: str) -> bool:
        return protocol in self.allowed_protocols
