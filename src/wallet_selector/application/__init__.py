"""Application layer - The request broker

Orchestrates domain objects and protocol plugins, and talks to the outside
world only through ports:

- InterceptionBoundary: caller-facing request handling
- MessageRelay: envelope channels between boundary and coordinator
- Coordinator: wallet arbitration
- JwtVerifierRegistry: delegated JWT verification
"""

from wallet_selector.application.pending_requests import PendingEntry, PendingRequestTable
from wallet_selector.application.message_relay import Direction, MessageRelay
from wallet_selector.application.jwt_verifiers import CallbackVerifier, JwtVerifierRegistry, call_verifier
from wallet_selector.application.interception_boundary import (
    InterceptionBoundary,
    extract_digital_requests,
    is_protocol_request,
)
from wallet_selector.application.coordinator import WALLET_RESPONSE_TIMEOUT, Coordinator, CoordinatorError

__all__ = [
    "PendingEntry",
    "PendingRequestTable",
    "Direction",
    "MessageRelay",
    "CallbackVerifier",
    "JwtVerifierRegistry",
    "call_verifier",
    "InterceptionBoundary",
    "extract_digital_requests",
    "is_protocol_request",
    "Coordinator",
    "CoordinatorError",
    "WALLET_RESPONSE_TIMEOUT",
]
