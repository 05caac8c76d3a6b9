"""Error kinds raised by the protocol plugins and the request broker

Plugin validation errors are raised synchronously from ``prepare_request`` /
``validate_response``; the interception boundary turns them into the rejection
seen by the caller. Caller-visible rejections (timeout, cancellation, aborted
or invalid responses) are raised from the awaited ``get()`` call.
"""

from typing import Optional


class WalletSelectorError(Exception):
    """Base class for every error raised by the wallet selector"""

    pass


# ======================
# Request validation
# ======================


class MissingParameter(WalletSelectorError):
    """A required authorization request parameter is absent"""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Request must include {parameter}")


class MissingPresentationMechanism(WalletSelectorError):
    """None of the presentation mechanisms were supplied"""

    def __init__(self) -> None:
        super().__init__(
            "OpenID4VP request must include request_uri, presentation_definition, "
            "presentation_definition_uri, or dcql_query"
        )


class InvalidParameter(WalletSelectorError):
    """A parameter is present but carries an unacceptable value"""

    def __init__(self, parameter: str, reason: str = ""):
        self.parameter = parameter
        self.reason = reason
        message = f"Invalid {parameter}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SignatureInvalid(WalletSelectorError):
    """The delegated signature verification rejected a request object"""

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or "Invalid signature"
        super().__init__(f"JWT signature verification failed: {self.reason}")


# ======================
# Response validation
# ======================


class MissingCredentialPayload(WalletSelectorError):
    """A wallet response carries neither a vp_token nor an encrypted envelope"""

    def __init__(self, message: str = "OpenID4VP response must include vp_token or encrypted response"):
        super().__init__(message)


class InvalidDescriptor(WalletSelectorError):
    """
    A presentation submission is structurally invalid.

    ``index`` is the offending ``descriptor_map`` position, or None when the
    problem is on the submission itself.
    """

    def __init__(self, index: Optional[int], field: str):
        self.index = index
        self.field = field
        if index is None:
            message = f"Presentation submission must include {field}"
        else:
            message = f"Descriptor {index} missing {field}"
        super().__init__(message)


# ======================
# Broker
# ======================


class NotSupported(WalletSelectorError):
    """No plugin is registered for the protocol"""

    def __init__(self, protocol: str):
        self.protocol = protocol
        super().__init__(f"No plugin registered for protocol: {protocol}")


class Timeout(WalletSelectorError):
    """A pending request received no response within its window"""

    def __init__(self, correlation_id: str):
        self.correlation_id = correlation_id
        super().__init__("Request timeout")


class UserCancelled(WalletSelectorError):
    """The request was cancelled before a credential was obtained"""

    def __init__(self, message: str = "User cancelled the request"):
        super().__init__(message)


class RequestAborted(WalletSelectorError):
    """The coordinator reported an error for the request"""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidResponse(WalletSelectorError):
    """The wallet response failed protocol validation"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid credential response: {reason}")


class ProtocolMismatch(WalletSelectorError):
    """The selected wallet supports none of the prepared sub-requests"""

    def __init__(self, wallet_id: str, protocols: list[str]):
        self.wallet_id = wallet_id
        self.protocols = protocols
        super().__init__(f"Wallet {wallet_id} supports none of the requested protocols: {', '.join(protocols)}")


# ======================
# External collaborators
# ======================


class FetchFailed(WalletSelectorError):
    """A referenced resource could not be retrieved"""

    def __init__(self, uri: str, reason: str):
        self.uri = uri
        self.reason = reason
        super().__init__(f"Failed to fetch {uri}: {reason}")


class MalformedVerifierResult(WalletSelectorError):
    """A verification callback returned something other than {valid: bool, ...}"""

    def __init__(self) -> None:
        super().__init__("malformed verifier result")
