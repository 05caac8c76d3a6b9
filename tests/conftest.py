"""Common test fixtures"""

from datetime import datetime, timezone
from typing import Any, Dict

import pytest

from tests.fakes import FakeRequestObjectFetcher
from wallet_selector.domain import (
    FixedClock,
    SelectorConfig,
    TimeoutConfig,
    WalletDescriptor,
)


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Fixed clock at 2024-01-15 12:00:00 UTC"""
    return FixedClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def wallet_a() -> WalletDescriptor:
    """Wallet speaking OpenID4VP"""
    return WalletDescriptor(
        id="wallet-a",
        name="Wallet A",
        endpoint="https://wallet-a.example.com/authorize",
        supported_protocols=frozenset({"openid4vp"}),
    )


@pytest.fixture
def wallet_b() -> WalletDescriptor:
    """Wallet speaking only w3c-vc"""
    return WalletDescriptor(
        id="wallet-b",
        name="Wallet B",
        endpoint="https://wallet-b.example.com",
        supported_protocols=frozenset({"w3c-vc"}),
    )


@pytest.fixture
def fast_timeouts() -> TimeoutConfig:
    """Short timeouts so expiry paths run quickly"""
    return TimeoutConfig(
        request_seconds=0.2,
        protocol_refresh_seconds=0.2,
        wallet_response_seconds=0.3,
        request_object_fetch_seconds=1.0,
    )


@pytest.fixture
def config(wallet_a: WalletDescriptor, wallet_b: WalletDescriptor, fast_timeouts: TimeoutConfig) -> SelectorConfig:
    """Selector configuration with both sample wallets"""
    return SelectorConfig(timeouts=fast_timeouts, wallets=[wallet_a, wallet_b])


@pytest.fixture
def authorization_request() -> Dict[str, Any]:
    """OpenID4VP authorization request passed by value"""
    return {
        "client_id": "x509_san_dns:verifier.example.com",
        "response_type": "vp_token",
        "response_mode": "direct_post",
        "response_uri": "https://verifier.example.com/post",
        "nonce": "n-0S6_WzA2Mj",
        "state": "af0ifjsldkj",
        "dcql_query": {"credentials": [{"id": "pid", "format": "dc+sd-jwt"}]},
    }


@pytest.fixture
def wallet_response() -> Dict[str, Any]:
    """Well-formed OpenID4VP wallet response"""
    return {
        "vp_token": "eyJhbGciOiJFUzI1NiJ9.eyJ2cCI6e319.c2ln",
        "presentation_submission": {
            "id": "submission-1",
            "definition_id": "pid_request",
            "descriptor_map": [{"id": "pid", "format": "dc+sd-jwt", "path": "$"}],
        },
        "state": "af0ifjsldkj",
    }


@pytest.fixture
def fake_fetcher() -> FakeRequestObjectFetcher:
    return FakeRequestObjectFetcher()
