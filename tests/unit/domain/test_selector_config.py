"""Tests for selector configuration models"""

import pytest
from pydantic import ValidationError

from wallet_selector.domain import RequestObjectPolicy, SelectorConfig, TimeoutConfig, WalletDescriptor


class TestTimeoutConfig:
    """Tests for TimeoutConfig"""

    def test_defaults(self):
        timeouts = TimeoutConfig()

        assert timeouts.request_seconds == 30.0
        assert timeouts.protocol_refresh_seconds == 1.0
        assert timeouts.wallet_response_seconds == 300.0
        assert timeouts.request_object_fetch_seconds == 10.0

    def test_wallet_window_cannot_be_shorter_than_request_window(self):
        with pytest.raises(ValidationError, match="wallet_response_seconds"):
            TimeoutConfig(request_seconds=30, wallet_response_seconds=10)

    def test_rejects_non_positive_timeouts(self):
        with pytest.raises(ValidationError):
            TimeoutConfig(protocol_refresh_seconds=0)


class TestSelectorConfig:
    """Tests for SelectorConfig"""

    def test_defaults(self):
        config = SelectorConfig()

        assert config.enabled is True
        assert config.strict_protocol_match is True
        assert config.request_objects == RequestObjectPolicy(resolve=True, require_verified=False)
        assert config.wallets == []
        assert config.verifier_jwks == {}

    def test_rejects_duplicate_wallet_ids(self, wallet_a: WalletDescriptor):
        clone = wallet_a.model_copy(update={"endpoint": "https://other.example.com"})
        with pytest.raises(ValidationError, match="Duplicate wallet id"):
            SelectorConfig(wallets=[wallet_a, clone])

    def test_rejects_duplicate_endpoints(self, wallet_a: WalletDescriptor):
        clone = wallet_a.model_copy(update={"id": "wallet-a2"})
        with pytest.raises(ValidationError, match="Duplicate wallet endpoint"):
            SelectorConfig(wallets=[wallet_a, clone])

    def test_verifier_jwks_keyed_by_url(self):
        with pytest.raises(ValidationError, match="Invalid wallet URL"):
            SelectorConfig(verifier_jwks={"wallet-a": []})

    def test_immutable(self):
        config = SelectorConfig()
        with pytest.raises(ValidationError):
            config.enabled = False
