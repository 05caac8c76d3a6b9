"""Value objects for the domain layer"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Final

from wallet_selector.domain.clock import Clock


@dataclass(frozen=True)
class CorrelationId:
    """
    Identifier linking an outbound credential request to its eventual response.

    Travels with every envelope exchanged between the interception boundary
    and the coordinator.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("CorrelationId cannot be blank")

    def __str__(self) -> str:
        return self.value


class CorrelationIdAllocator:
    """
    Allocates correlation ids of the form ``<prefix>-<counter>-<epoch ms>``.

    The counter is monotonic for the lifetime of the allocator, so ids never
    collide even when the clock does not move between two allocations.
    """

    def __init__(self, clock: Clock, prefix: str = "dc-req"):
        self._clock = clock
        self._prefix = prefix
        self._counter = itertools.count(1)

    def next(self) -> CorrelationId:
        return CorrelationId(value=f"{self._prefix}-{next(self._counter)}-{self._clock.epoch_millis()}")


class RequestStatus(str, Enum):
    """Lifecycle status of a credential request"""

    PENDING: Final[str] = "pending"
    RESOLVED: Final[str] = "resolved"
    REJECTED: Final[str] = "rejected"
    TIMED_OUT: Final[str] = "timed_out"

    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class MessageKind(str, Enum):
    """Marker carried by every relay envelope"""

    CREDENTIALS_REQUEST: Final[str] = "credentials_request"
    SELECTION_STARTED: Final[str] = "selection_started"
    CREDENTIALS_RESPONSE: Final[str] = "credentials_response"
    CANCEL_REQUEST: Final[str] = "cancel_request"
    PROTOCOLS_REQUEST: Final[str] = "protocols_request"
    PROTOCOLS_RESPONSE: Final[str] = "protocols_response"


class ResponseModeOption(str, Enum):
    """Response modes accepted in an OpenID4VP authorization request"""

    DIRECT_POST: Final[str] = "direct_post"
    DIRECT_POST_JWT: Final[str] = "direct_post.jwt"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)
