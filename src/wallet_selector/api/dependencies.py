"""Dependency injection container for FastAPI"""

import logging
from typing import Optional

from wallet_selector.adapter import (
    DeferredSelectionSurface,
    DeferredWalletInvocationChannel,
    DeferToCallerNativePath,
    HttpxRequestObjectFetcher,
    InMemoryWalletStore,
    JoserfcJwtVerifier,
)
from wallet_selector.application import Coordinator, InterceptionBoundary, JwtVerifierRegistry, MessageRelay
from wallet_selector.config import load_or_create_config
from wallet_selector.domain import Clock, SelectorConfig, SystemClock
from wallet_selector.port.output import NativeCredentialPath, RequestObjectFetcher, WalletStore
from wallet_selector.protocol import ProtocolPluginRegistry, create_default_registry

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container for the wallet selector application.

    Manages singleton instances of the broker components and their
    adapters, and their start / close lifecycle.
    """

    def __init__(
        self,
        config: Optional[SelectorConfig] = None,
        clock: Optional[Clock] = None,
        native_path: Optional[NativeCredentialPath] = None,
        fetcher: Optional[RequestObjectFetcher] = None,
    ):
        """
        Initialize container with optional configuration and overrides.

        Args:
            config: Selector configuration (if None, loaded from environment)
            clock: Clock (if None, system clock)
            native_path: Native credential path (if None, defer to caller)
            fetcher: Request object fetcher (if None, httpx)
        """
        self._config = config
        self._clock = clock
        self._native_path = native_path
        self._fetcher = fetcher
        self._relay: Optional[MessageRelay] = None
        self._registry: Optional[ProtocolPluginRegistry] = None
        self._wallet_store: Optional[InMemoryWalletStore] = None
        self._selection_surface: Optional[DeferredSelectionSurface] = None
        self._wallet_invocation: Optional[DeferredWalletInvocationChannel] = None
        self._verifiers: Optional[JwtVerifierRegistry] = None
        self._coordinator: Optional[Coordinator] = None
        self._boundary: Optional[InterceptionBoundary] = None

    def get_config(self) -> SelectorConfig:
        """Get selector configuration"""
        if self._config is None:
            self._config = load_or_create_config()
        return self._config

    def get_clock(self) -> Clock:
        """Get clock instance (singleton)"""
        if self._clock is None:
            self._clock = SystemClock()
        return self._clock

    def get_relay(self) -> MessageRelay:
        """Get message relay (singleton)"""
        if self._relay is None:
            self._relay = MessageRelay()
        return self._relay

    def get_fetcher(self) -> RequestObjectFetcher:
        """Get request object fetcher (singleton)"""
        if self._fetcher is None:
            self._fetcher = HttpxRequestObjectFetcher(timeout=self.get_config().timeouts.request_object_fetch_seconds)
        return self._fetcher

    def get_registry(self) -> ProtocolPluginRegistry:
        """Get protocol plugin registry (singleton)"""
        if self._registry is None:
            self._registry = create_default_registry(fetcher=self.get_fetcher(), clock=self.get_clock())
        return self._registry

    def get_wallet_store(self) -> WalletStore:
        """Get wallet store (singleton), seeded from configuration"""
        if self._wallet_store is None:
            config = self.get_config()
            self._wallet_store = InMemoryWalletStore(wallets=config.wallets, enabled=config.enabled)
        return self._wallet_store

    def get_selection_surface(self) -> DeferredSelectionSurface:
        """Get selection surface (singleton)"""
        if self._selection_surface is None:
            self._selection_surface = DeferredSelectionSurface()
        return self._selection_surface

    def get_wallet_invocation(self) -> DeferredWalletInvocationChannel:
        """Get wallet invocation channel (singleton)"""
        if self._wallet_invocation is None:
            self._wallet_invocation = DeferredWalletInvocationChannel()
        return self._wallet_invocation

    def get_native_path(self) -> NativeCredentialPath:
        """Get native credential path (singleton)"""
        if self._native_path is None:
            self._native_path = DeferToCallerNativePath()
        return self._native_path

    def get_verifiers(self) -> JwtVerifierRegistry:
        """Get JWT verifier registry (singleton), with configured JWKS registered"""
        if self._verifiers is None:
            self._verifiers = JwtVerifierRegistry()
            for endpoint, jwks in self.get_config().verifier_jwks.items():
                self._verifiers.register_verifier(endpoint, JoserfcJwtVerifier(jwks))
        return self._verifiers

    def get_coordinator(self) -> Coordinator:
        """Get coordinator (singleton)"""
        if self._coordinator is None:
            self._coordinator = Coordinator(
                relay=self.get_relay(),
                registry=self.get_registry(),
                wallet_store=self.get_wallet_store(),
                selection=self.get_selection_surface(),
                invoker=self.get_wallet_invocation(),
                config=self.get_config(),
                verifiers=self.get_verifiers(),
            )
        return self._coordinator

    def get_boundary(self) -> InterceptionBoundary:
        """Get interception boundary (singleton)"""
        if self._boundary is None:
            self._boundary = InterceptionBoundary(
                relay=self.get_relay(),
                registry=self.get_registry(),
                native=self.get_native_path(),
                config=self.get_config(),
                clock=self.get_clock(),
            )
        return self._boundary

    async def start(self) -> None:
        """Start the relay, then the coordinator, then the boundary"""
        await self.get_relay().start()
        self.get_coordinator().start()
        await self.get_boundary().start()

    async def close(self) -> None:
        """Close in reverse order"""
        if self._boundary is not None:
            await self._boundary.close()
        if self._coordinator is not None:
            await self._coordinator.close()
        if self._relay is not None:
            await self._relay.stop()


# Global container instance
_container: Optional[DependencyContainer] = None


def get_container() -> DependencyContainer:
    """Get or create global dependency container"""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def set_container(container: Optional[DependencyContainer]) -> None:
    """Set global dependency container (useful for testing)"""
    global _container
    _container = container


# FastAPI dependency functions
def get_boundary() -> InterceptionBoundary:
    """FastAPI dependency for the interception boundary"""
    return get_container().get_boundary()


def get_coordinator() -> Coordinator:
    """FastAPI dependency for the coordinator"""
    return get_container().get_coordinator()


def get_wallet_store() -> WalletStore:
    """FastAPI dependency for the wallet store"""
    return get_container().get_wallet_store()


def get_selection_surface() -> DeferredSelectionSurface:
    """FastAPI dependency for the selection surface"""
    return get_container().get_selection_surface()


def get_wallet_invocation() -> DeferredWalletInvocationChannel:
    """FastAPI dependency for the wallet invocation channel"""
    return get_container().get_wallet_invocation()


def get_clock() -> Clock:
    """FastAPI dependency for the clock"""
    return get_container().get_clock()
