"""Wallet selector configuration models

This module defines the runtime configuration of the broker:

- Timeouts for the request window, the supported-protocol refresh,
  the wallet round trip and request object retrieval
- Request object (JAR) resolution and trust policy
- Arbitration policy when the chosen wallet matches no sub-request
- Wallets seeded into the wallet store

All configuration is immutable and validated.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wallet_selector.domain.wallet import WalletDescriptor, is_absolute_http_url


# ======================
# Timeouts
# ======================


class TimeoutConfig(BaseModel):
    """
    Timeouts, in seconds.

    Attributes:
        request_seconds: Caller-side window up to the coordinator's decision
            to solicit a selection or fall back to native
        protocol_refresh_seconds: Bound on the supported-protocol refresh
        wallet_response_seconds: Bound on the post-selection wallet round trip
        request_object_fetch_seconds: Bound on a single JAR fetch
    """

    model_config = ConfigDict(frozen=True)

    request_seconds: float = Field(30.0, gt=0, description="Caller-side request window")
    protocol_refresh_seconds: float = Field(1.0, gt=0, description="Supported-protocol refresh bound")
    wallet_response_seconds: float = Field(300.0, gt=0, description="Wallet round trip bound")
    request_object_fetch_seconds: float = Field(10.0, gt=0, description="JAR fetch bound")

    @model_validator(mode="after")
    def validate_wallet_window(self) -> "TimeoutConfig":
        """The wallet round trip depends on a human and must outlast the request window"""
        if self.wallet_response_seconds < self.request_seconds:
            raise ValueError("wallet_response_seconds must not be shorter than request_seconds")
        return self


# ======================
# Request Object Policy
# ======================


class RequestObjectPolicy(BaseModel):
    """
    How ``request_uri`` references are handled once a wallet is chosen.

    Attributes:
        resolve: Fetch and decode the JAR before formatting the wallet request
        require_verified: Fail the request when no verification delegate
            vouched for the JAR signature
    """

    model_config = ConfigDict(frozen=True)

    resolve: bool = Field(True, description="Resolve request_uri before invoking the wallet")
    require_verified: bool = Field(False, description="Reject JARs nobody verified")


# ======================
# Main Selector Configuration
# ======================


class SelectorConfig(BaseModel):
    """
    Complete wallet selector configuration.

    Attributes:
        timeouts: Timeout settings
        request_objects: JAR resolution policy
        strict_protocol_match: Fail instead of falling back to the first
            sub-request when the chosen wallet supports none of them
        enabled: Initial value of the global enable flag
        wallets: Wallets seeded into the store
        verifier_jwks: Trusted keys per wallet endpoint, used to verify the
            request objects resolved for that wallet
    """

    model_config = ConfigDict(frozen=True)

    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig, description="Timeouts")
    request_objects: RequestObjectPolicy = Field(default_factory=RequestObjectPolicy, description="JAR policy")
    strict_protocol_match: bool = Field(True, description="Reject wallet/protocol mismatches")
    enabled: bool = Field(True, description="Global enable flag")
    wallets: List[WalletDescriptor] = Field(default_factory=list, description="Seed wallets")
    verifier_jwks: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict, description="JWKS per wallet endpoint"
    )

    @model_validator(mode="after")
    def validate_unique_wallets(self) -> "SelectorConfig":
        """Ensure wallet ids and endpoints are unique"""
        ids = [wallet.id for wallet in self.wallets]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate wallet id in configuration")
        endpoints = [wallet.endpoint for wallet in self.wallets]
        if len(endpoints) != len(set(endpoints)):
            raise ValueError("Duplicate wallet endpoint in configuration")
        return self

    @model_validator(mode="after")
    def validate_verifier_endpoints(self) -> "SelectorConfig":
        """JWKS are keyed by wallet endpoint URL"""
        for endpoint in self.verifier_jwks:
            if not is_absolute_http_url(endpoint):
                raise ValueError(f"Invalid wallet URL: {endpoint}")
        return self
