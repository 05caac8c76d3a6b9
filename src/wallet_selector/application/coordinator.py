"""Coordinator - Wallet arbitration for brokered credential requests

Receives credentials_request envelopes from the interception boundary and
answers each with exactly one credentials_response:

- use_native when the selector is disabled, no enabled wallet shares a
  protocol with the request, the user prefers the native path or the
  wallet hands the request back
- response + protocol when the chosen wallet answered
- error when anything failed
- an empty body when the user or the wallet cancelled

A cancel_request from the boundary (caller cancelled, timed out or went
away) stops the arbitration instead; no reply is sent for it.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from returns.result import Failure

from wallet_selector.domain import (
    Envelope,
    MessageKind,
    NativeChosen,
    PreparedRequest,
    ProtocolMismatch,
    SelectionCancelled,
    SelectorConfig,
    WalletCancelled,
    WalletChosen,
    WalletDescriptor,
    WalletNativeFallback,
    WalletResponded,
    WalletSelectorError,
    collect_supported_protocols,
    credentials_response,
    match_wallets,
    protocols_response,
    selection_started,
)
from wallet_selector.port.input import ArbitrateRequest
from wallet_selector.port.output import SelectionSurface, WalletInvocationChannel, WalletStore
from wallet_selector.protocol import ProtocolPluginRegistry
from wallet_selector.application.jwt_verifiers import JwtVerifierRegistry
from wallet_selector.application.message_relay import MessageRelay

logger = logging.getLogger(__name__)

WALLET_RESPONSE_TIMEOUT = "Wallet response timeout"


class CoordinatorError(WalletSelectorError):
    """The coordinator could not arbitrate a request"""

    pass


class Coordinator(ArbitrateRequest):
    """
    Privileged side of the broker.

    Owns the JWT verifier registry (``verifiers``) and one task per
    in-flight correlation id.
    """

    def __init__(
        self,
        relay: MessageRelay,
        registry: ProtocolPluginRegistry,
        wallet_store: WalletStore,
        selection: SelectionSurface,
        invoker: WalletInvocationChannel,
        config: SelectorConfig,
        verifiers: Optional[JwtVerifierRegistry] = None,
    ):
        self.relay = relay
        self.registry = registry
        self.wallet_store = wallet_store
        self.selection = selection
        self.invoker = invoker
        self.config = config
        self.verifiers = verifiers or JwtVerifierRegistry()
        self._tasks: Dict[str, "asyncio.Task[None]"] = {}

    # ======================
    # Lifecycle
    # ======================

    def start(self) -> None:
        self.relay.attach_coordinator(self.on_message)

    async def close(self) -> None:
        """Detach and cancel every in-flight arbitration"""
        self.relay.detach_coordinator()
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    @property
    def in_flight(self) -> List[str]:
        return list(self._tasks)

    # ======================
    # Inbound messages
    # ======================

    async def on_message(self, envelope: Envelope) -> None:
        if envelope.kind is MessageKind.CREDENTIALS_REQUEST:
            self._spawn(envelope)
        elif envelope.kind is MessageKind.CANCEL_REQUEST:
            self._cancel(envelope.correlation_id, envelope.body.get("reason"))
        elif envelope.kind is MessageKind.PROTOCOLS_REQUEST:
            protocols = await self._supported_protocols()
            self.relay.send_to_boundary(protocols_response(envelope.correlation_id, protocols))
        else:
            logger.warning("Unexpected %s message for %s", envelope.kind.value, envelope.correlation_id)

    def _spawn(self, envelope: Envelope) -> None:
        correlation_id = envelope.correlation_id
        if correlation_id in self._tasks:
            logger.warning("Duplicate credentials_request %s ignored", correlation_id)
            return
        try:
            requests = [PreparedRequest.from_message(message) for message in envelope.body.get("requests", [])]
        except (KeyError, TypeError) as e:
            logger.warning("Malformed credentials_request %s: %s", correlation_id, e)
            self.relay.send_to_boundary(credentials_response(correlation_id, error=f"Malformed request: {e}"))
            return
        options = envelope.body.get("options") or {}

        task = asyncio.create_task(self._run(correlation_id, requests, options), name=f"arbitrate-{correlation_id}")
        self._tasks[correlation_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(correlation_id, None))

    def _cancel(self, correlation_id: str, reason: Optional[str]) -> None:
        """Stop arbitrating a request nobody waits for; no reply is sent"""
        task = self._tasks.get(correlation_id)
        if task is None:
            logger.debug("Nothing in flight for cancelled request %s", correlation_id)
            return
        logger.info("Abandoning arbitration of %s (%s)", correlation_id, reason)
        task.cancel()

    async def _run(self, correlation_id: str, requests: List[PreparedRequest], options: Mapping[str, Any]) -> None:
        try:
            reply = await self.execute(correlation_id, requests, options)
        except Exception as e:
            logger.exception("Arbitration of %s failed", correlation_id)
            reply = credentials_response(correlation_id, error=str(e))
        self.relay.send_to_boundary(reply)

    async def _supported_protocols(self) -> List[str]:
        wallets_result = await self.wallet_store.get_wallets()
        if isinstance(wallets_result, Failure):
            logger.warning("Cannot load wallets: %s", wallets_result.failure())
            return []
        return collect_supported_protocols(wallets_result.unwrap())

    # ======================
    # Arbitration
    # ======================

    async def execute(
        self, correlation_id: str, requests: Sequence[PreparedRequest], options: Mapping[str, Any]
    ) -> Envelope:
        """
        Arbitrate one request.

        Flow:
        1. Disabled selector -> use_native
        2. Record the interception
        3. No enabled wallet sharing a protocol -> use_native
        4. Announce selection_started and wait for the user's choice
        5. Pick the sub-request the chosen wallet supports
        6. Resolve by-reference parameters (request_uri)
        7. Format, invoke the wallet and map its answer
        """
        try:
            enabled_result = await self.wallet_store.is_enabled()
            if isinstance(enabled_result, Failure):
                raise CoordinatorError(f"Failed to read settings: {enabled_result.failure()}")
            if not enabled_result.unwrap():
                logger.info("Wallet selector disabled, %s goes native", correlation_id)
                return credentials_response(correlation_id, use_native=True)

            await self._record_usage("intercept")

            wallets_result = await self.wallet_store.get_wallets()
            if isinstance(wallets_result, Failure):
                raise CoordinatorError(f"Failed to load wallets: {wallets_result.failure()}")

            requested = {request.protocol for request in requests}
            matching = match_wallets(wallets_result.unwrap(), requested)
            if not matching:
                logger.info("No wallet supports %s, %s goes native", sorted(requested), correlation_id)
                return credentials_response(correlation_id, use_native=True)

            self.relay.send_to_boundary(selection_started(correlation_id))
            outcome = await self.selection.select(correlation_id, matching, requests)

            if isinstance(outcome, NativeChosen):
                return credentials_response(correlation_id, use_native=True)
            if isinstance(outcome, SelectionCancelled):
                logger.info("Selection cancelled for %s", correlation_id)
                return credentials_response(correlation_id)
            if not isinstance(outcome, WalletChosen):
                raise CoordinatorError(f"Unknown selection outcome: {outcome!r}")

            return await self._serve_with_wallet(correlation_id, outcome.wallet, requests, outcome.matched_protocol)

        except WalletSelectorError as e:
            logger.warning("Request %s failed: %s", correlation_id, e)
            return credentials_response(correlation_id, error=str(e))

    async def _serve_with_wallet(
        self,
        correlation_id: str,
        wallet: WalletDescriptor,
        requests: Sequence[PreparedRequest],
        matched_protocol: Optional[str] = None,
    ) -> Envelope:
        await self._record_usage(f"wallet:{wallet.id}")

        request = self.choose_request(wallet, requests, matched_protocol)
        data = await self._resolve(request, wallet)
        formatted = self.registry.format_for_wallet(request.protocol, data, wallet.endpoint)

        logger.info("Invoking wallet %s for %s (%s)", wallet.id, correlation_id, request.protocol)
        try:
            outcome = await asyncio.wait_for(
                self.invoker.invoke(correlation_id, wallet, formatted),
                timeout=self.config.timeouts.wallet_response_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Wallet %s did not answer %s in time", wallet.id, correlation_id)
            return credentials_response(correlation_id, error=WALLET_RESPONSE_TIMEOUT)

        if isinstance(outcome, WalletResponded):
            return credentials_response(
                correlation_id, response=outcome.payload, protocol=outcome.protocol or request.protocol
            )
        if isinstance(outcome, WalletNativeFallback):
            return credentials_response(correlation_id, use_native=True)
        if isinstance(outcome, WalletCancelled):
            return credentials_response(correlation_id)
        raise CoordinatorError(f"Unknown wallet outcome: {outcome!r}")

    def choose_request(
        self, wallet: WalletDescriptor, requests: Sequence[PreparedRequest], matched_protocol: Optional[str] = None
    ) -> PreparedRequest:
        """
        First sub-request, in submission order, the wallet supports.

        A protocol already matched by the selection step wins when the
        wallet supports it and one of the sub-requests carries it.

        Raises:
            ProtocolMismatch: None matches and strict matching is on
        """
        if matched_protocol and wallet.supports(matched_protocol):
            for request in requests:
                if request.protocol == matched_protocol:
                    return request
        for request in requests:
            if wallet.supports(request.protocol):
                return request
        protocols = [request.protocol for request in requests]
        if self.config.strict_protocol_match:
            raise ProtocolMismatch(wallet.id, protocols)
        logger.warning("Wallet %s supports none of %s, using %s", wallet.id, protocols, protocols[0])
        return requests[0]

    async def _resolve(self, request: PreparedRequest, wallet: WalletDescriptor) -> Dict[str, Any]:
        policy = self.config.request_objects
        if not policy.resolve or not request.data.get("request_uri"):
            return request.data

        verifier = self.verifiers.strategy_for(wallet.endpoint)
        resolved = await self.registry.resolve_request(request.protocol, request.data, verifier)
        if policy.require_verified and not resolved.get("verified"):
            raise CoordinatorError(f"Request object for {wallet.id} could not be verified")
        return resolved

    async def _record_usage(self, action: str) -> None:
        result = await self.wallet_store.record_usage(action)
        if isinstance(result, Failure):
            logger.warning("Failed to record usage %s: %s", action, result.failure())
