"""Relay envelopes and the outcomes of the external selection and invocation steps

Envelopes are the only thing that crosses between the interception boundary
and the coordinator. Bodies are plain dictionaries; the relay never looks
inside them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from wallet_selector.domain.value_objects import MessageKind
from wallet_selector.domain.wallet import WalletDescriptor

_UNSET: Any = object()


# ======================
# Envelopes
# ======================


@dataclass(frozen=True)
class Envelope:
    """
    Inter-context message.

    Attributes:
        correlation_id: Request (or protocol refresh) the message belongs to
        kind: Message marker
        body: Opaque payload
    """

    correlation_id: str
    kind: MessageKind
    body: Mapping[str, Any] = field(default_factory=dict)


def credentials_request(
    correlation_id: str, requests: Sequence[Mapping[str, Any]], options: Mapping[str, Any]
) -> Envelope:
    return Envelope(
        correlation_id=correlation_id,
        kind=MessageKind.CREDENTIALS_REQUEST,
        body={"requests": list(requests), "options": dict(options)},
    )


def credentials_response(
    correlation_id: str,
    *,
    use_native: bool = False,
    error: Optional[str] = None,
    response: Any = _UNSET,
    protocol: Optional[str] = None,
) -> Envelope:
    """
    Build a response envelope.

    Only the fields that are set end up in the body; a body with none of
    them means the request was cancelled. An explicit ``response=None`` is
    kept so an empty wallet answer is not mistaken for a cancellation.
    """
    body: Dict[str, Any] = {}
    if use_native:
        body["use_native"] = True
    if error is not None:
        body["error"] = error
    if response is not _UNSET:
        body["response"] = response
    if protocol is not None:
        body["protocol"] = protocol
    return Envelope(correlation_id=correlation_id, kind=MessageKind.CREDENTIALS_RESPONSE, body=body)


def selection_started(correlation_id: str) -> Envelope:
    return Envelope(correlation_id=correlation_id, kind=MessageKind.SELECTION_STARTED)


def cancel_request(correlation_id: str, reason: str) -> Envelope:
    """Tell the coordinator nobody is waiting for this request any more"""
    return Envelope(correlation_id=correlation_id, kind=MessageKind.CANCEL_REQUEST, body={"reason": reason})


def protocols_request(update_id: str) -> Envelope:
    return Envelope(correlation_id=update_id, kind=MessageKind.PROTOCOLS_REQUEST)


def protocols_response(update_id: str, protocols: List[str]) -> Envelope:
    return Envelope(correlation_id=update_id, kind=MessageKind.PROTOCOLS_RESPONSE, body={"protocols": protocols})


# ======================
# Selection outcomes
# ======================


@dataclass(frozen=True)
class WalletChosen:
    """User picked a wallet"""

    wallet: WalletDescriptor
    matched_protocol: Optional[str] = None


@dataclass(frozen=True)
class NativeChosen:
    """User preferred the caller's native credential path"""

    pass


@dataclass(frozen=True)
class SelectionCancelled:
    """User dismissed the selection"""

    pass


SelectionOutcome = WalletChosen | NativeChosen | SelectionCancelled


# ======================
# Wallet invocation outcomes
# ======================


@dataclass(frozen=True)
class WalletResponded:
    """Wallet returned a protocol response"""

    payload: Any
    protocol: Optional[str] = None


@dataclass(frozen=True)
class WalletNativeFallback:
    """Wallet asked to hand the request back to the native path"""

    pass


@dataclass(frozen=True)
class WalletCancelled:
    """Wallet round trip was abandoned"""

    pass


InvocationOutcome = WalletResponded | WalletNativeFallback | WalletCancelled
