"""Configuration loader for the wallet selector"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from wallet_selector.domain import (
    RequestObjectPolicy,
    SelectorConfig,
    TimeoutConfig,
    WalletDescriptor,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "WALLET_SELECTOR_"

DEFAULT_WALLETS: List[Dict[str, Any]] = [
    {
        "id": "wallet-1",
        "name": "Example Wallet",
        "url": "https://wallet.example.com",
        "protocols": ["openid4vp", "w3c-vc"],
        "description": "Example digital identity wallet",
        "enabled": True,
    }
]

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {value!r}")


def parse_wallets(entries: List[Dict[str, Any]]) -> Tuple[List[WalletDescriptor], Dict[str, List[Dict[str, Any]]]]:
    """
    Parse wallet entries as found in a wallets file.

    Entries use the descriptor fields (``url`` / ``protocols`` aliases are
    accepted) and may carry a ``jwks`` list of trusted keys for that wallet.

    Returns:
        (wallets, JWKS keyed by wallet endpoint)
    """
    wallets = []
    verifier_jwks: Dict[str, List[Dict[str, Any]]] = {}
    for entry in entries:
        wallet = WalletDescriptor.model_validate(entry)
        wallets.append(wallet)
        if entry.get("jwks"):
            verifier_jwks[wallet.endpoint] = list(entry["jwks"])
    return wallets, verifier_jwks


def load_config_from_env() -> SelectorConfig | None:
    """
    Load selector configuration from environment variables.

    Environment variables:
    - WALLET_SELECTOR_WALLETS_FILE: Path to a JSON list of wallets (required)
    - WALLET_SELECTOR_ENABLED: Initial enable flag (default: true)
    - WALLET_SELECTOR_REQUEST_TIMEOUT: Request window in seconds (default: 30)
    - WALLET_SELECTOR_PROTOCOL_REFRESH_TIMEOUT: Protocol refresh bound (default: 1)
    - WALLET_SELECTOR_WALLET_RESPONSE_TIMEOUT: Wallet round trip bound (default: 300)
    - WALLET_SELECTOR_FETCH_TIMEOUT: Request object fetch bound (default: 10)
    - WALLET_SELECTOR_RESOLVE_REQUEST_OBJECTS: Resolve request_uri (default: true)
    - WALLET_SELECTOR_REQUIRE_VERIFIED_REQUEST_OBJECTS: Reject unverified JARs (default: false)
    - WALLET_SELECTOR_STRICT_PROTOCOL_MATCH: Reject wallet/protocol mismatches (default: true)

    Returns:
        SelectorConfig if a wallets file is configured, None otherwise
    """
    wallets_path = os.getenv(ENV_PREFIX + "WALLETS_FILE")
    if not wallets_path:
        return None

    wallets_file = Path(wallets_path)
    if not wallets_file.exists():
        raise FileNotFoundError(f"Wallets file not found: {wallets_path}")

    with open(wallets_file, "r") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise ValueError(f"Wallets file must contain a JSON list: {wallets_path}")

    wallets, verifier_jwks = parse_wallets(entries)

    timeouts = TimeoutConfig(
        request_seconds=_env_float("REQUEST_TIMEOUT", 30.0),
        protocol_refresh_seconds=_env_float("PROTOCOL_REFRESH_TIMEOUT", 1.0),
        wallet_response_seconds=_env_float("WALLET_RESPONSE_TIMEOUT", 300.0),
        request_object_fetch_seconds=_env_float("FETCH_TIMEOUT", 10.0),
    )

    request_objects = RequestObjectPolicy(
        resolve=_env_bool("RESOLVE_REQUEST_OBJECTS", True),
        require_verified=_env_bool("REQUIRE_VERIFIED_REQUEST_OBJECTS", False),
    )

    return SelectorConfig(
        timeouts=timeouts,
        request_objects=request_objects,
        strict_protocol_match=_env_bool("STRICT_PROTOCOL_MATCH", True),
        enabled=_env_bool("ENABLED", True),
        wallets=wallets,
        verifier_jwks=verifier_jwks,
    )


def create_test_config(
    wallets: Optional[List[Dict[str, Any]]] = None, timeouts: Optional[TimeoutConfig] = None
) -> SelectorConfig:
    """
    Create a test configuration.

    This is useful for testing and development when no wallets file is
    available.

    Args:
        wallets: Wallet entries; defaults to DEFAULT_WALLETS
        timeouts: Timeout settings; defaults to TimeoutConfig()

    Returns:
        SelectorConfig with test settings
    """
    parsed, verifier_jwks = parse_wallets(DEFAULT_WALLETS if wallets is None else wallets)
    return SelectorConfig(
        timeouts=timeouts or TimeoutConfig(),
        wallets=parsed,
        verifier_jwks=verifier_jwks,
    )


def load_or_create_config() -> SelectorConfig:
    """
    Load configuration from environment or create test config.

    First tries to load from environment variables.
    If not available, creates a test configuration.

    Returns:
        SelectorConfig
    """
    config = load_config_from_env()
    if config is None:
        logger.warning("No environment configuration found, using test config")
        config = create_test_config()
    else:
        logger.info("Loaded configuration from environment (%d wallet(s))", len(config.wallets))

    return config
