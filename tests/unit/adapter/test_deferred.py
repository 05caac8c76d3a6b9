"""Tests for the deferred selection surface and wallet invocation channel"""

import asyncio

import pytest
from returns.result import Failure

from tests.fakes import eventually
from wallet_selector.adapter.output.deferred import (
    DeferredSelectionSurface,
    DeferredWalletInvocationChannel,
    NotPending,
    OriginMismatch,
    PendingFutures,
    UnknownWallet,
)
from wallet_selector.domain import (
    NativeChosen,
    PreparedRequest,
    SelectionCancelled,
    WalletCancelled,
    WalletChosen,
    WalletNativeFallback,
    WalletResponded,
)

CID = "dc-req-1-1705320000000"
FORMATTED = {
    "protocol": "openid4vp",
    "wallet_url": "https://wallet-a.example.com/authorize",
    "authorization_url": "https://wallet-a.example.com/authorize?client_id=verifier",
    "request_data": {"client_id": "verifier"},
}


class TestPendingFutures:
    """Tests for PendingFutures"""

    @pytest.mark.asyncio
    async def test_wait_and_resolve(self):
        pending: PendingFutures[str, int] = PendingFutures()
        task = asyncio.create_task(pending.wait("k", "details"))
        await eventually(lambda: pending.keys())

        assert pending.details("k") == "details"
        assert pending.resolve("k", 7) is True
        assert pending.resolve("k", 8) is False
        assert await task == 7
        assert pending.details("k") is None

    @pytest.mark.asyncio
    async def test_open_twice(self):
        pending: PendingFutures[str, int] = PendingFutures()
        pending.open("k", "first")

        with pytest.raises(ValueError, match="Already waiting"):
            pending.open("k", "second")

    @pytest.mark.asyncio
    async def test_resolve_unknown(self):
        assert PendingFutures().resolve("missing", 1) is False


class TestDeferredSelectionSurface:
    """Tests for DeferredSelectionSurface"""

    async def _select(self, surface, wallets, requests):
        task = asyncio.create_task(surface.select(CID, wallets, requests))
        await eventually(lambda: surface.pending())
        return task

    @pytest.mark.asyncio
    async def test_choose_wallet(self, wallet_a, wallet_b):
        surface = DeferredSelectionSurface()
        requests = [PreparedRequest(protocol="w3c-vc", data={}), PreparedRequest(protocol="openid4vp", data={})]
        task = await self._select(surface, [wallet_a, wallet_b], requests)

        assert surface.get_pending(CID).to_dict()["protocols"] == ["w3c-vc", "openid4vp"]
        result = surface.choose_wallet(CID, "wallet-a")

        assert await task == WalletChosen(wallet=wallet_a, matched_protocol="openid4vp")
        assert result.unwrap() == WalletChosen(wallet=wallet_a, matched_protocol="openid4vp")
        assert surface.pending() == []

    @pytest.mark.asyncio
    async def test_choose_unknown_wallet(self, wallet_a):
        surface = DeferredSelectionSurface()
        task = await self._select(surface, [wallet_a], [PreparedRequest(protocol="openid4vp", data={})])

        result = surface.choose_wallet(CID, "wallet-z")

        assert isinstance(result, Failure)
        assert isinstance(result.failure(), UnknownWallet)
        assert surface.pending() == [CID]
        surface.cancel(CID)
        assert await task == SelectionCancelled()

    @pytest.mark.asyncio
    async def test_choose_native(self, wallet_a):
        surface = DeferredSelectionSurface()
        task = await self._select(surface, [wallet_a], [PreparedRequest(protocol="openid4vp", data={})])

        surface.choose_native(CID)

        assert await task == NativeChosen()

    def test_answer_without_selection(self):
        surface = DeferredSelectionSurface()

        for result in (surface.choose_wallet(CID, "wallet-a"), surface.choose_native(CID), surface.cancel(CID)):
            assert isinstance(result, Failure)
            assert isinstance(result.failure(), NotPending)


class TestDeferredWalletInvocationChannel:
    """Tests for DeferredWalletInvocationChannel"""

    async def _invoke(self, channel, wallet):
        task = asyncio.create_task(channel.invoke(CID, wallet, FORMATTED))
        await eventually(lambda: channel.pending())
        return task

    @pytest.mark.asyncio
    async def test_pending_invocation(self, wallet_a):
        channel = DeferredWalletInvocationChannel()
        task = await self._invoke(channel, wallet_a)

        assert channel.get_pending(CID).to_dict() == {
            "correlation_id": CID,
            "wallet_id": "wallet-a",
            "protocol": "openid4vp",
            "authorization_url": FORMATTED["authorization_url"],
        }
        channel.cancel(CID)
        assert await task == WalletCancelled()

    @pytest.mark.asyncio
    async def test_deliver_response(self, wallet_a):
        channel = DeferredWalletInvocationChannel()
        task = await self._invoke(channel, wallet_a)

        channel.deliver_response(CID, {"vp_token": "abc"}, origin="https://wallet-a.example.com")

        assert await task == WalletResponded(payload={"vp_token": "abc"}, protocol="openid4vp")

    @pytest.mark.asyncio
    async def test_origin_mismatch(self, wallet_a):
        channel = DeferredWalletInvocationChannel()
        task = await self._invoke(channel, wallet_a)

        result = channel.deliver_response(CID, {"vp_token": "abc"}, origin="https://evil.example.com")

        assert isinstance(result.failure(), OriginMismatch)
        assert not task.done()
        channel.fallback_to_native(CID)
        assert await task == WalletNativeFallback()

    def test_deliver_without_invocation(self):
        result = DeferredWalletInvocationChannel().deliver_response(CID, {})

        assert isinstance(result.failure(), NotPending)
