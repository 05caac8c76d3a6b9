"""Domain layer - Value objects, state machine and models

Pure data and rules with no I/O:
- Correlation ids and request lifecycle (credential_request)
- Wallet descriptors and protocol matching (wallet)
- Relay envelopes and selection/invocation outcomes (messages)
- JWT verification delegation types (verification)
- Error kinds (errors)
- Configuration (selector_config)
"""

from wallet_selector.domain.clock import Clock, FixedClock, SystemClock
from wallet_selector.domain.credential import DigitalCredential
from wallet_selector.domain.credential_request import (
    CredentialRequest,
    InvalidStateTransition,
    PreparedRequest,
    mark_rejected,
    mark_resolved,
    mark_timed_out,
)
from wallet_selector.domain.errors import (
    FetchFailed,
    InvalidDescriptor,
    InvalidParameter,
    InvalidResponse,
    MalformedVerifierResult,
    MissingCredentialPayload,
    MissingParameter,
    MissingPresentationMechanism,
    NotSupported,
    ProtocolMismatch,
    RequestAborted,
    SignatureInvalid,
    Timeout,
    UserCancelled,
    WalletSelectorError,
)
from wallet_selector.domain.messages import (
    Envelope,
    InvocationOutcome,
    NativeChosen,
    SelectionCancelled,
    SelectionOutcome,
    WalletCancelled,
    WalletChosen,
    WalletNativeFallback,
    WalletResponded,
    cancel_request,
    credentials_request,
    credentials_response,
    protocols_request,
    protocols_response,
    selection_started,
)
from wallet_selector.domain.selector_config import RequestObjectPolicy, SelectorConfig, TimeoutConfig
from wallet_selector.domain.value_objects import (
    CorrelationId,
    CorrelationIdAllocator,
    MessageKind,
    RequestStatus,
    ResponseModeOption,
)
from wallet_selector.domain.verification import (
    JwtVerificationOptions,
    JwtVerificationResult,
    parse_verifier_result,
)
from wallet_selector.domain.wallet import (
    PROTOCOL_ID_PATTERN,
    WalletDescriptor,
    collect_supported_protocols,
    generate_wallet_id,
    is_absolute_http_url,
    match_wallets,
    url_origin,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Value objects
    "CorrelationId",
    "CorrelationIdAllocator",
    "MessageKind",
    "RequestStatus",
    "ResponseModeOption",
    # Credential request
    "CredentialRequest",
    "InvalidStateTransition",
    "PreparedRequest",
    "mark_rejected",
    "mark_resolved",
    "mark_timed_out",
    "DigitalCredential",
    # Wallets
    "PROTOCOL_ID_PATTERN",
    "WalletDescriptor",
    "collect_supported_protocols",
    "generate_wallet_id",
    "is_absolute_http_url",
    "match_wallets",
    "url_origin",
    # Messages
    "Envelope",
    "InvocationOutcome",
    "NativeChosen",
    "SelectionCancelled",
    "SelectionOutcome",
    "WalletCancelled",
    "WalletChosen",
    "WalletNativeFallback",
    "WalletResponded",
    "cancel_request",
    "credentials_request",
    "credentials_response",
    "protocols_request",
    "protocols_response",
    "selection_started",
    # Verification
    "JwtVerificationOptions",
    "JwtVerificationResult",
    "parse_verifier_result",
    # Configuration
    "RequestObjectPolicy",
    "SelectorConfig",
    "TimeoutConfig",
    # Errors
    "FetchFailed",
    "InvalidDescriptor",
    "InvalidParameter",
    "InvalidResponse",
    "MalformedVerifierResult",
    "MissingCredentialPayload",
    "MissingParameter",
    "MissingPresentationMechanism",
    "NotSupported",
    "ProtocolMismatch",
    "RequestAborted",
    "SignatureInvalid",
    "Timeout",
    "UserCancelled",
    "WalletSelectorError",
]
