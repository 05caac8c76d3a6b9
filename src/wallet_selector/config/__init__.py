"""Configuration module"""

from wallet_selector.config.loader import (
    DEFAULT_WALLETS,
    create_test_config,
    load_config_from_env,
    load_or_create_config,
    parse_wallets,
)

__all__ = ["DEFAULT_WALLETS", "load_config_from_env", "create_test_config", "load_or_create_config", "parse_wallets"]
