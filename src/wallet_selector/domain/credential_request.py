"""Credential request state machine

A credential request is created by the interception boundary for every
protocol-oriented call that survives preparation. It starts Pending and
moves exactly once into one of three terminal states:

1. Resolved - a credential (or the native path's result) was returned
2. Rejected - an error, cancellation or invalid response ended the request
3. TimedOut - no response arrived within the request window

Requests are immutable; transitions return a new instance or a Failure.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from returns.result import Failure, Result, Success

from wallet_selector.domain.clock import Clock
from wallet_selector.domain.value_objects import CorrelationId, RequestStatus


@dataclass(frozen=True)
class PreparedRequest:
    """
    One sub-request of a batch after its plugin normalized it.

    Attributes:
        protocol: Protocol identifier
        data: Normalized payload returned by ``prepare_request``
        original_data: Payload as the caller submitted it
    """

    protocol: str
    data: Dict[str, Any]
    original_data: Any = None

    def to_message(self) -> Dict[str, Any]:
        return {"protocol": self.protocol, "data": self.data, "original_data": self.original_data}

    @classmethod
    def from_message(cls, message: Mapping[str, Any]) -> "PreparedRequest":
        return cls(
            protocol=message["protocol"],
            data=dict(message.get("data") or {}),
            original_data=message.get("original_data"),
        )


@dataclass(frozen=True)
class CredentialRequest:
    """
    A caller-initiated request tracked until it settles.

    Attributes:
        correlation_id: Identifier shared with the coordinator
        options: Caller's original options (replayed on native fallback)
        prepared_requests: Sub-requests that survived preparation
        created_at: When the request was dispatched
        status: Lifecycle status
        settled_at: When a terminal status was reached
    """

    correlation_id: CorrelationId
    options: Mapping[str, Any]
    prepared_requests: Tuple[PreparedRequest, ...]
    created_at: datetime
    status: RequestStatus = RequestStatus.PENDING
    settled_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if not self.prepared_requests:
            raise ValueError("A credential request needs at least one prepared sub-request")
        if self.settled_at is not None and self.settled_at < self.created_at:
            raise ValueError(f"settled_at ({self.settled_at}) cannot be before created_at ({self.created_at})")

    @property
    def protocol_ids(self) -> Tuple[str, ...]:
        return tuple(prepared.protocol for prepared in self.prepared_requests)


@dataclass(frozen=True)
class InvalidStateTransition:
    """Error when attempting to settle an already settled request"""

    current_state: str = ""
    attempted_transition: str = ""

    @property
    def message(self) -> str:
        return f"Cannot transition from {self.current_state} via {self.attempted_transition}"


def _settle(
    request: CredentialRequest, status: RequestStatus, transition: str, clock: Clock
) -> Result[CredentialRequest, InvalidStateTransition]:
    if request.status.is_terminal():
        return Failure(
            InvalidStateTransition(current_state=request.status.value, attempted_transition=transition)
        )
    return Success(replace(request, status=status, settled_at=clock.now()))


def mark_resolved(request: CredentialRequest, clock: Clock) -> Result[CredentialRequest, InvalidStateTransition]:
    """Pending -> Resolved"""
    return _settle(request, RequestStatus.RESOLVED, "mark_resolved", clock)


def mark_rejected(request: CredentialRequest, clock: Clock) -> Result[CredentialRequest, InvalidStateTransition]:
    """Pending -> Rejected"""
    return _settle(request, RequestStatus.REJECTED, "mark_rejected", clock)


def mark_timed_out(request: CredentialRequest, clock: Clock) -> Result[CredentialRequest, InvalidStateTransition]:
    """Pending -> TimedOut"""
    return _settle(request, RequestStatus.TIMED_OUT, "mark_timed_out", clock)
