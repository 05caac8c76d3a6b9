"""Tests for the message relay"""

import asyncio

import pytest

from wallet_selector.application import MessageRelay
from wallet_selector.domain import credentials_response, protocols_request, selection_started


class TestMessageRelay:
    """Tests for MessageRelay"""

    @pytest.mark.asyncio
    async def test_delivers_in_fifo_order(self):
        """Envelopes of one direction arrive in send order"""
        relay = MessageRelay()
        received = []
        relay.attach_boundary(received.append)
        await relay.start()
        try:
            for n in range(5):
                assert relay.send_to_boundary(selection_started(f"dc-req-{n}"))
            await relay.join()
        finally:
            await relay.stop()

        assert [envelope.correlation_id for envelope in received] == [f"dc-req-{n}" for n in range(5)]

    @pytest.mark.asyncio
    async def test_awaits_async_handlers_in_order(self):
        """An async handler finishes before the next envelope is delivered"""
        relay = MessageRelay()
        events = []

        async def handler(envelope):
            events.append(("start", envelope.correlation_id))
            await asyncio.sleep(0.01)
            events.append(("end", envelope.correlation_id))

        relay.attach_coordinator(handler)
        await relay.start()
        try:
            relay.send_to_coordinator(protocols_request("u-1"))
            relay.send_to_coordinator(protocols_request("u-2"))
            await relay.join()
        finally:
            await relay.stop()

        assert events == [("start", "u-1"), ("end", "u-1"), ("start", "u-2"), ("end", "u-2")]

    @pytest.mark.asyncio
    async def test_directions_are_independent(self):
        relay = MessageRelay()
        to_coordinator, to_boundary = [], []
        relay.attach_coordinator(to_coordinator.append)
        relay.attach_boundary(to_boundary.append)
        await relay.start()
        try:
            relay.send_to_coordinator(protocols_request("u-1"))
            relay.send_to_boundary(credentials_response("dc-req-1", use_native=True))
            await relay.join()
        finally:
            await relay.stop()

        assert [envelope.correlation_id for envelope in to_coordinator] == ["u-1"]
        assert [envelope.correlation_id for envelope in to_boundary] == ["dc-req-1"]

    @pytest.mark.asyncio
    async def test_drops_when_not_started(self):
        relay = MessageRelay()
        relay.attach_boundary(lambda envelope: None)

        assert relay.send_to_boundary(selection_started("dc-req-1")) is False

    @pytest.mark.asyncio
    async def test_drops_without_handler(self):
        relay = MessageRelay()
        await relay.start()
        try:
            assert relay.send_to_coordinator(protocols_request("u-1")) is False
        finally:
            await relay.stop()

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_delivery(self):
        """A handler error drops that envelope only"""
        relay = MessageRelay()
        received = []

        def handler(envelope):
            if envelope.correlation_id == "bad":
                raise RuntimeError("boom")
            received.append(envelope.correlation_id)

        relay.attach_boundary(handler)
        await relay.start()
        try:
            relay.send_to_boundary(selection_started("bad"))
            relay.send_to_boundary(selection_started("good"))
            await relay.join()
        finally:
            await relay.stop()

        assert received == ["good"]

    @pytest.mark.asyncio
    async def test_stop_and_restart(self):
        relay = MessageRelay()
        relay.attach_boundary(lambda envelope: None)
        await relay.start()
        assert relay.running
        await relay.stop()
        assert not relay.running
        assert relay.send_to_boundary(selection_started("dc-req-1")) is False

        await relay.start()
        try:
            assert relay.send_to_boundary(selection_started("dc-req-1")) is True
        finally:
            await relay.stop()
