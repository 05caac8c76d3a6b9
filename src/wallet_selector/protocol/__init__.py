"""Protocol layer - Pluggable credential-presentation protocols

- ProtocolPlugin: contract every protocol implements
- ProtocolPluginRegistry: protocol id -> plugin routing
- OpenID4VPPlugin: OpenID for Verifiable Presentations
"""

from wallet_selector.protocol.base import ProtocolPlugin
from wallet_selector.protocol.openid4vp import JAR_TYPE, PROTOCOL_ID as OPENID4VP, OpenID4VPPlugin
from wallet_selector.protocol.registry import ProtocolPluginRegistry, create_default_registry

__all__ = [
    "ProtocolPlugin",
    "ProtocolPluginRegistry",
    "create_default_registry",
    "OpenID4VPPlugin",
    "OPENID4VP",
    "JAR_TYPE",
]
