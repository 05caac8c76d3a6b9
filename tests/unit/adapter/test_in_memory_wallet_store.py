"""Tests for InMemoryWalletStore"""

from datetime import datetime, timezone

import pytest
from returns.result import Failure, Success

from wallet_selector.adapter.output.persistence import InMemoryWalletStore
from wallet_selector.domain import WalletDescriptor


def _registration(wallet_id: str, endpoint: str) -> WalletDescriptor:
    return WalletDescriptor(
        id=wallet_id,
        name="Registered Wallet",
        endpoint=endpoint,
        supported_protocols=frozenset({"openid4vp"}),
        auto_registered=True,
        registered_at=datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
    )


class TestWallets:
    """Tests for the wallet list"""

    @pytest.mark.asyncio
    async def test_get_and_save(self, wallet_a: WalletDescriptor, wallet_b: WalletDescriptor):
        store = InMemoryWalletStore(wallets=[wallet_a])

        assert (await store.get_wallets()).unwrap() == [wallet_a]

        assert isinstance(await store.save_wallets([wallet_b, wallet_a]), Success)
        assert (await store.get_wallets()).unwrap() == [wallet_b, wallet_a]

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, wallet_a: WalletDescriptor):
        store = InMemoryWalletStore(wallets=[wallet_a])
        (await store.get_wallets()).unwrap().clear()

        assert (await store.get_wallets()).unwrap() == [wallet_a]


class TestRegistration:
    """Tests for wallet self-registration"""

    @pytest.mark.asyncio
    async def test_register_new_wallet(self, wallet_a: WalletDescriptor):
        store = InMemoryWalletStore(wallets=[wallet_a])
        wallet = _registration("wallet-new", "https://new.example.com")

        result = await store.register_wallet(wallet)

        assert result.unwrap() == (wallet, False)
        assert (await store.is_registered("https://new.example.com")).unwrap() is True
        assert [w.id for w in (await store.get_wallets()).unwrap()] == ["wallet-a", "wallet-new"]

    @pytest.mark.asyncio
    async def test_register_is_deduplicated_by_endpoint(self, wallet_a: WalletDescriptor):
        store = InMemoryWalletStore(wallets=[wallet_a])

        result = await store.register_wallet(_registration("wallet-other", wallet_a.endpoint))

        assert result.unwrap() == (wallet_a, True)
        assert len((await store.get_wallets()).unwrap()) == 1

    @pytest.mark.asyncio
    async def test_register_rejects_id_collision(self, wallet_a: WalletDescriptor):
        store = InMemoryWalletStore(wallets=[wallet_a])

        result = await store.register_wallet(_registration("wallet-a", "https://elsewhere.example.com"))

        assert isinstance(result, Failure)
        assert "already in use" in str(result.failure())

    @pytest.mark.asyncio
    async def test_is_registered_unknown(self):
        assert (await InMemoryWalletStore().is_registered("https://unknown.example.com")).unwrap() is False


class TestSettingsAndStats:
    """Tests for the enable flag and usage statistics"""

    @pytest.mark.asyncio
    async def test_enable_flag(self):
        store = InMemoryWalletStore(enabled=False)
        assert (await store.is_enabled()).unwrap() is False

        await store.set_enabled(True)
        assert (await store.is_enabled()).unwrap() is True

    @pytest.mark.asyncio
    async def test_record_usage(self):
        store = InMemoryWalletStore()
        for action in ("intercept", "intercept", "wallet:wallet-a", "wallet:wallet-b", "wallet:wallet-a", "other"):
            await store.record_usage(action)

        assert (await store.get_stats()).unwrap() == {
            "intercept_count": 2,
            "wallet_uses": {"wallet-a": 2, "wallet-b": 1},
        }

    @pytest.mark.asyncio
    async def test_clear(self, wallet_a: WalletDescriptor):
        store = InMemoryWalletStore(wallets=[wallet_a])
        await store.record_usage("intercept")

        await store.clear()

        assert (await store.get_wallets()).unwrap() == []
        assert (await store.get_stats()).unwrap() == {"intercept_count": 0, "wallet_uses": {}}
