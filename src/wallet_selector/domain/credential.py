"""Credential handed back to the caller after a successful wallet round trip"""

from dataclasses import dataclass
from typing import Any, Dict

from wallet_selector.domain.clock import Clock


@dataclass(frozen=True)
class DigitalCredential:
    """
    Validated wallet response wrapped for the caller.

    Attributes:
        protocol: Protocol the response was validated against
        data: Validated response payload
        id: Credential identifier
        type: Always ``digital``
    """

    protocol: str
    data: Any
    id: str
    type: str = "digital"

    @classmethod
    def create(cls, protocol: str, data: Any, clock: Clock) -> "DigitalCredential":
        return cls(protocol=protocol, data=data, id=f"credential-{clock.epoch_millis()}")

    def to_json(self) -> Dict[str, Any]:
        return {"type": self.type, "protocol": self.protocol, "data": self.data, "id": self.id}
