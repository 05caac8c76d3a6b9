"""Wallet descriptor model and protocol matching

A wallet is an external agent reachable at an endpoint URL that can satisfy
credential requests for a set of protocols. Wallet descriptors are owned by
the wallet store; the broker only reads them.
"""

import re
import secrets
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from wallet_selector.domain.clock import Clock


PROTOCOL_ID_PATTERN = re.compile(r"^[a-z0-9-]+$")


def is_absolute_http_url(value: str) -> bool:
    """Check that ``value`` is an absolute http(s) URL with a host"""
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def url_origin(value: str) -> str:
    """Scheme and authority of a URL, e.g. ``https://wallet.example.com``"""
    parts = urlsplit(value)
    return f"{parts.scheme}://{parts.netloc}"


class WalletDescriptor(BaseModel):
    """
    A wallet the user can pick to satisfy a credential request.

    Attributes:
        id: Store-assigned identifier
        name: Display name
        endpoint: URL the authorization request is sent to
        supported_protocols: Protocol identifiers the wallet understands
        enabled: Whether the wallet takes part in selection
        description: Optional free text
        auto_registered: Whether the wallet registered itself
        registered_at: When the wallet registered itself
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Wallet identifier")
    name: str = Field(..., min_length=1, description="Display name")
    endpoint: str = Field(..., validation_alias=AliasChoices("endpoint", "url"), description="Wallet endpoint URL")
    supported_protocols: FrozenSet[str] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("supported_protocols", "protocols"),
        description="Supported protocol identifiers",
    )
    enabled: bool = Field(True, description="Whether wallet is offered for selection")
    description: str = Field("", description="Optional description")
    auto_registered: bool = Field(False, description="Whether wallet registered itself")
    registered_at: Optional[datetime] = Field(None, description="Self-registration time")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not is_absolute_http_url(v):
            raise ValueError(f"Invalid wallet URL: {v}")
        return v

    @field_validator("supported_protocols")
    @classmethod
    def validate_protocol_ids(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        for protocol in v:
            if not PROTOCOL_ID_PATTERN.match(protocol):
                raise ValueError(
                    f"Invalid protocol identifier: {protocol} "
                    "(must contain only lowercase letters, digits, and hyphens)"
                )
        return v

    def supports(self, protocol: str) -> bool:
        return protocol in self.supported_protocols

    def supports_any(self, protocols: Iterable[str]) -> bool:
        return not self.supported_protocols.isdisjoint(protocols)

    @property
    def origin(self) -> str:
        return url_origin(self.endpoint)


def match_wallets(wallets: Iterable[WalletDescriptor], requested_protocols: Iterable[str]) -> List[WalletDescriptor]:
    """
    Enabled wallets sharing at least one protocol with the request.

    Store order is preserved.
    """
    requested = set(requested_protocols)
    return [wallet for wallet in wallets if wallet.enabled and wallet.supports_any(requested)]


def collect_supported_protocols(wallets: Iterable[WalletDescriptor]) -> List[str]:
    """Sorted union of the protocols of every enabled wallet"""
    protocols: set[str] = set()
    for wallet in wallets:
        if wallet.enabled:
            protocols.update(wallet.supported_protocols)
    return sorted(protocols)


def generate_wallet_id(clock: Clock) -> str:
    """Identifier for a self-registering wallet, e.g. ``wallet-1718000000000-k3j9x2ab``"""
    return f"wallet-{clock.epoch_millis()}-{secrets.token_hex(4)}"
