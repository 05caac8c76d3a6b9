"""Native credential path port - The caller's own credential API"""

from abc import ABC, abstractmethod
from typing import Any


class NativeCredentialPath(ABC):
    """
    The credential API the interception boundary sits in front of.

    Opaque calls, unsupported batches and native fallbacks are replayed here
    verbatim; whatever it returns or raises is what the caller sees.
    """

    @abstractmethod
    async def get(self, options: Any) -> Any:
        """Perform the caller's request through the native implementation"""
        pass

    def allows_protocol(self, protocol: str) -> bool:
        """Whether the native implementation handles ``protocol`` by itself"""
        return False
