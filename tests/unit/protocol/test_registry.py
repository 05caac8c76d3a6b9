"""Tests for the protocol plugin registry"""

from typing import Any, Dict

import pytest

from wallet_selector.domain import FixedClock, NotSupported
from wallet_selector.protocol import OpenID4VPPlugin, ProtocolPlugin, ProtocolPluginRegistry, create_default_registry


class EchoPlugin(ProtocolPlugin):
    """Accepts everything"""

    def __init__(self, protocol_id: str = "echo"):
        self._id = protocol_id

    @property
    def id(self) -> str:
        return self._id

    def prepare_request(self, data: Any) -> Dict[str, Any]:
        return {"echo": data}

    def validate_response(self, response: Any) -> Any:
        return response


class NoIdPlugin:
    id = ""

    def prepare_request(self, data):
        return data

    def validate_response(self, response):
        return response


class NoValidatePlugin:
    id = "broken"
    validate_response = None

    def prepare_request(self, data):
        return data


class TestRegistration:
    """Tests for plugin registration"""

    def test_register_and_lookup(self):
        registry = ProtocolPluginRegistry()
        plugin = EchoPlugin()
        registry.register(plugin)

        assert registry.is_supported("echo")
        assert registry.get_plugin("echo") is plugin
        assert registry.supported_protocols() == ["echo"]

    def test_register_replaces_same_id(self):
        """A second plugin with the same id replaces the first"""
        registry = ProtocolPluginRegistry()
        first, second = EchoPlugin(), EchoPlugin()
        registry.register(first)
        registry.register(second)

        assert registry.get_plugin("echo") is second
        assert registry.supported_protocols() == ["echo"]

    def test_register_requires_id(self):
        with pytest.raises(TypeError, match="id"):
            ProtocolPluginRegistry().register(NoIdPlugin())

    def test_register_requires_validate_response(self):
        with pytest.raises(TypeError, match="validate_response"):
            ProtocolPluginRegistry().register(NoValidatePlugin())

    def test_unregister(self):
        registry = ProtocolPluginRegistry()
        registry.register(EchoPlugin())

        assert registry.unregister("echo") is True
        assert registry.unregister("echo") is False
        assert not registry.is_supported("echo")


class TestRouting:
    """Tests for routing calls to plugins"""

    def test_prepare_and_validate_route_by_id(self):
        registry = ProtocolPluginRegistry()
        registry.register(EchoPlugin())

        assert registry.prepare_request("echo", 1) == {"echo": 1}
        assert registry.validate_response("echo", {"ok": True}) == {"ok": True}

    def test_default_format_for_wallet(self):
        registry = ProtocolPluginRegistry()
        registry.register(EchoPlugin())

        assert registry.format_for_wallet("echo", {"a": 1}, "https://wallet.example.com") == {
            "protocol": "echo",
            "wallet_url": "https://wallet.example.com",
            "request_data": {"a": 1},
        }

    @pytest.mark.asyncio
    async def test_default_resolve_is_identity(self):
        registry = ProtocolPluginRegistry()
        registry.register(EchoPlugin())

        request = {"a": 1}
        assert await registry.resolve_request("echo", request) is request

    @pytest.mark.parametrize("call", ["prepare_request", "validate_response"])
    def test_unknown_protocol(self, call):
        registry = ProtocolPluginRegistry()
        with pytest.raises(NotSupported, match="No plugin registered for protocol: p9"):
            getattr(registry, call)("p9", {})


class TestDefaultRegistry:
    """Tests for create_default_registry"""

    def test_registers_openid4vp(self, fixed_clock: FixedClock):
        registry = create_default_registry(fetcher=None, clock=fixed_clock)

        assert registry.supported_protocols() == ["openid4vp"]
        assert isinstance(registry.get_plugin("openid4vp"), OpenID4VPPlugin)
