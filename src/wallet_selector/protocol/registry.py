"""Protocol plugin registry

Maps protocol identifiers to plugins and routes prepare / validate / format
calls to the right one.
"""

import logging
from typing import Any, Dict, List, Optional

from wallet_selector.domain import Clock, NotSupported
from wallet_selector.port.output import JwtVerifier, RequestObjectFetcher
from wallet_selector.protocol.base import ProtocolPlugin
from wallet_selector.protocol.openid4vp import OpenID4VPPlugin

logger = logging.getLogger(__name__)


class ProtocolPluginRegistry:
    """Registry of protocol plugins keyed by protocol identifier"""

    def __init__(self) -> None:
        self._plugins: Dict[str, ProtocolPlugin] = {}

    def register(self, plugin: ProtocolPlugin) -> None:
        """
        Register a plugin, replacing any plugin with the same id.

        Raises:
            TypeError: If the plugin has no id or lacks callable
                prepare_request / validate_response
        """
        protocol_id = getattr(plugin, "id", None)
        if not isinstance(protocol_id, str) or not protocol_id:
            raise TypeError("Plugin must have an id")
        if not callable(getattr(plugin, "prepare_request", None)):
            raise TypeError("Plugin must implement prepare_request")
        if not callable(getattr(plugin, "validate_response", None)):
            raise TypeError("Plugin must implement validate_response")

        if protocol_id in self._plugins:
            logger.warning("Protocol plugin %s is already registered, replacing", protocol_id)

        self._plugins[protocol_id] = plugin
        logger.info("Registered protocol plugin: %s", protocol_id)

    def unregister(self, protocol_id: str) -> bool:
        """Remove a plugin; returns whether one was registered"""
        return self._plugins.pop(protocol_id, None) is not None

    def get_plugin(self, protocol_id: str) -> Optional[ProtocolPlugin]:
        return self._plugins.get(protocol_id)

    def is_supported(self, protocol_id: str) -> bool:
        return protocol_id in self._plugins

    def supported_protocols(self) -> List[str]:
        return list(self._plugins)

    def prepare_request(self, protocol_id: str, data: Any) -> Dict[str, Any]:
        return self._require(protocol_id).prepare_request(data)

    def validate_response(self, protocol_id: str, response: Any) -> Any:
        return self._require(protocol_id).validate_response(response)

    def format_for_wallet(self, protocol_id: str, request: Dict[str, Any], wallet_endpoint: str) -> Dict[str, Any]:
        return self._require(protocol_id).format_for_wallet(request, wallet_endpoint)

    async def resolve_request(
        self, protocol_id: str, request: Dict[str, Any], verifier: Optional[JwtVerifier] = None
    ) -> Dict[str, Any]:
        return await self._require(protocol_id).resolve_request(request, verifier)

    def _require(self, protocol_id: str) -> ProtocolPlugin:
        plugin = self._plugins.get(protocol_id)
        if plugin is None:
            raise NotSupported(protocol_id)
        return plugin


def create_default_registry(fetcher: Optional[RequestObjectFetcher], clock: Clock) -> ProtocolPluginRegistry:
    """
    Create a registry with the built-in plugins.

    Args:
        fetcher: Used to resolve ``request_uri`` and
            ``presentation_definition_uri`` references
        clock: Used to timestamp prepared requests
    """
    registry = ProtocolPluginRegistry()
    registry.register(OpenID4VPPlugin(fetcher=fetcher, clock=clock))
    return registry
