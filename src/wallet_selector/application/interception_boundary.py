"""Interception boundary - The caller-facing side of the broker

Sits in front of the native credential API. Protocol-oriented requests are
prepared by their protocol plugins, tracked in the pending request table
and handed to the coordinator through the message relay; everything else
is passed through to the native path untouched.

Request lifecycle:
1. get() classifies, prepares and dispatches a credentials_request
2. A 30 second window runs until the coordinator either answers or
   announces a wallet selection (selection_started disarms the window)
3. The credentials_response settles the caller's awaitable exactly once
"""

import asyncio
import itertools
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from returns.result import Failure, Result

from wallet_selector.domain import (
    Clock,
    CorrelationIdAllocator,
    CredentialRequest,
    DigitalCredential,
    Envelope,
    InvalidResponse,
    InvalidStateTransition,
    MessageKind,
    PreparedRequest,
    RequestAborted,
    SelectorConfig,
    Timeout,
    UserCancelled,
    cancel_request,
    credentials_request,
    mark_rejected,
    mark_resolved,
    mark_timed_out,
    protocols_request,
)
from wallet_selector.port.input import RequestCredential
from wallet_selector.port.output import NativeCredentialPath
from wallet_selector.protocol import ProtocolPluginRegistry
from wallet_selector.application.message_relay import MessageRelay
from wallet_selector.application.pending_requests import PendingEntry, PendingRequestTable

logger = logging.getLogger(__name__)

Transition = Callable[[CredentialRequest, Clock], Result[CredentialRequest, InvalidStateTransition]]

PROTOCOL_MEDIATIONS = ("optional", "required")


def is_protocol_request(options: Any) -> bool:
    """
    Whether a credential request targets digital credentials.

    True when the options carry ``identity`` or ``digital``, or ask for
    ``optional`` / ``required`` mediation.
    """
    if not isinstance(options, Mapping):
        return False
    return (
        bool(options.get("identity"))
        or bool(options.get("digital"))
        or options.get("mediation") in PROTOCOL_MEDIATIONS
    )


def extract_digital_requests(options: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """``options["digital"]["requests"]``, keeping only well-formed entries"""
    digital = options.get("digital")
    if not isinstance(digital, Mapping):
        return []
    requests = digital.get("requests")
    if not isinstance(requests, list):
        return []
    return [request for request in requests if isinstance(request, Mapping) and isinstance(request.get("protocol"), str)]


class InterceptionBoundary(RequestCredential):
    """
    Caller-facing credential request broker.

    Owns the pending request table and the supported-protocol cache; both
    live and die with the instance (start() / close()).
    """

    def __init__(
        self,
        relay: MessageRelay,
        registry: ProtocolPluginRegistry,
        native: NativeCredentialPath,
        config: SelectorConfig,
        clock: Clock,
    ):
        self.relay = relay
        self.registry = registry
        self.native = native
        self.config = config
        self.clock = clock
        self.pending = PendingRequestTable()
        self._allocator = CorrelationIdAllocator(clock)
        self._supported_protocols: Set[str] = set()
        self._protocol_updates: Dict[str, "asyncio.Future[List[str]]"] = {}
        self._update_counter = itertools.count(1)
        self._native_replays: Set["asyncio.Task[None]"] = set()

    # ======================
    # Lifecycle
    # ======================

    async def start(self) -> None:
        """Attach to the relay and load the supported-protocol cache"""
        self.relay.attach_boundary(self.on_message)
        await self.refresh_supported_protocols()

    async def close(self) -> None:
        """Reject every pending request and detach from the relay"""
        self.relay.detach_boundary()
        for update in self._protocol_updates.values():
            if not update.done():
                update.set_result(self.supported_protocols)
        self._protocol_updates.clear()

        for correlation_id in self.pending:
            entry = self.pending.pop(correlation_id)
            if entry is not None:
                self._settle(entry, mark_rejected, error=UserCancelled("Boundary closed"))

        replays = list(self._native_replays)
        for task in replays:
            task.cancel()
        await asyncio.gather(*replays, return_exceptions=True)

    # ======================
    # Supported protocols
    # ======================

    @property
    def supported_protocols(self) -> List[str]:
        return sorted(self._supported_protocols)

    async def refresh_supported_protocols(self) -> List[str]:
        """
        Ask the coordinator which protocols the enabled wallets support.

        Waits at most the protocol refresh timeout; on expiry, or when the
        boundary closes meanwhile, the previous cache is kept.
        """
        update_id = f"protocols-update-{next(self._update_counter)}-{self.clock.epoch_millis()}"
        update: "asyncio.Future[List[str]]" = asyncio.get_running_loop().create_future()
        self._protocol_updates[update_id] = update

        try:
            if self.relay.send_to_coordinator(protocols_request(update_id)):
                protocols = await asyncio.wait_for(update, timeout=self.config.timeouts.protocol_refresh_seconds)
                self._supported_protocols = set(protocols)
                logger.info("Updated supported protocols: %s", self.supported_protocols)
        except asyncio.TimeoutError:
            logger.warning("Supported protocol refresh timed out, keeping %s", self.supported_protocols)
        finally:
            self._protocol_updates.pop(update_id, None)

        return self.supported_protocols

    def allows_protocol(self, protocol: str) -> bool:
        """Whether a wallet (or, failing that, the native path) handles ``protocol``"""
        if protocol in self._supported_protocols:
            return True
        return self.native.allows_protocol(protocol)

    # ======================
    # Requests
    # ======================

    async def get(self, options: Any) -> Any:
        if not is_protocol_request(options):
            logger.debug("Not a digital credential request, passing to native path")
            return await self.native.get(options)

        requests = extract_digital_requests(options)
        if not requests:
            logger.info("No digital credential requests, passing to native path")
            return await self.native.get(options)

        supported = [request for request in requests if request["protocol"] in self._supported_protocols]
        unsupported = [request["protocol"] for request in requests if request["protocol"] not in self._supported_protocols]
        if unsupported:
            logger.info("No wallet supports %s", unsupported)
        if not supported:
            logger.info("No requests match supported protocols, passing to native path")
            return await self.native.get(options)

        prepared = self._prepare(supported)
        if not prepared:
            logger.info("No requests could be prepared, passing to native path")
            return await self.native.get(options)

        return await self._dispatch(options, prepared)

    def _prepare(self, requests: List[Mapping[str, Any]]) -> List[PreparedRequest]:
        prepared = []
        for request in requests:
            protocol = request["protocol"]
            try:
                data = self.registry.prepare_request(protocol, request.get("data"))
            except Exception as e:
                logger.warning("Dropping %s request: %s", protocol, e)
                continue
            prepared.append(PreparedRequest(protocol=protocol, data=data, original_data=request.get("data")))
        return prepared

    async def _dispatch(self, options: Mapping[str, Any], prepared: List[PreparedRequest]) -> Any:
        loop = asyncio.get_running_loop()
        correlation_id = self._allocator.next()
        key = str(correlation_id)

        entry = PendingEntry(
            request=CredentialRequest(
                correlation_id=correlation_id,
                options=options,
                prepared_requests=tuple(prepared),
                created_at=self.clock.now(),
            ),
            future=loop.create_future(),
        )
        entry.timer = loop.call_later(self.config.timeouts.request_seconds, self._on_timeout, key)
        self.pending.register(entry)

        logger.info("Dispatching %s with %d request(s)", key, len(prepared))
        self.relay.send_to_coordinator(
            credentials_request(key, [request.to_message() for request in prepared], options)
        )

        try:
            return await entry.future
        except asyncio.CancelledError:
            if self.pending.pop(key) is not None:
                logger.info("Caller abandoned %s", key)
                self.relay.send_to_coordinator(cancel_request(key, "abandoned"))
            raise

    def cancel(self, correlation_id: str) -> bool:
        """Cancel a pending request; the caller sees UserCancelled"""
        entry = self.pending.pop(correlation_id)
        if entry is None:
            logger.warning("Cancel for unknown request %s", correlation_id)
            return False
        self._settle(entry, mark_rejected, error=UserCancelled())
        self.relay.send_to_coordinator(cancel_request(correlation_id, "cancelled"))
        return True

    def _on_timeout(self, correlation_id: str) -> None:
        entry = self.pending.pop(correlation_id)
        if entry is None:
            return
        logger.warning("Request %s timed out", correlation_id)
        self._settle(entry, mark_timed_out, error=Timeout(correlation_id))
        self.relay.send_to_coordinator(cancel_request(correlation_id, "timeout"))

    # ======================
    # Inbound messages
    # ======================

    def on_message(self, envelope: Envelope) -> None:
        if envelope.kind is MessageKind.PROTOCOLS_RESPONSE:
            self._on_protocols_response(envelope)
        elif envelope.kind is MessageKind.SELECTION_STARTED:
            if not self.pending.disarm_timer(envelope.correlation_id):
                logger.warning("selection_started for unknown request %s", envelope.correlation_id)
        elif envelope.kind is MessageKind.CREDENTIALS_RESPONSE:
            self._on_credentials_response(envelope)
        else:
            logger.warning("Unexpected %s message for %s", envelope.kind.value, envelope.correlation_id)

    def _on_protocols_response(self, envelope: Envelope) -> None:
        update = self._protocol_updates.get(envelope.correlation_id)
        if update is None or update.done():
            logger.debug("Late protocols_response %s", envelope.correlation_id)
            return
        protocols = envelope.body.get("protocols")
        if not isinstance(protocols, list):
            logger.warning("protocols_response %s carries no protocol list", envelope.correlation_id)
            return
        update.set_result([str(protocol) for protocol in protocols])

    def _on_credentials_response(self, envelope: Envelope) -> None:
        correlation_id = envelope.correlation_id
        entry = self.pending.pop(correlation_id)
        if entry is None:
            logger.warning("Received response for unknown request %s", correlation_id)
            return

        body = envelope.body
        if body.get("use_native"):
            logger.info("Replaying %s through the native path", correlation_id)
            task = asyncio.create_task(self._replay_native(entry))
            self._native_replays.add(task)
            task.add_done_callback(self._native_replays.discard)
        elif body.get("error"):
            self._settle(entry, mark_rejected, error=RequestAborted(str(body["error"])))
        elif "response" in body:
            self._settle_response(entry, body["response"], body.get("protocol"))
        else:
            self._settle(entry, mark_rejected, error=UserCancelled())

    def _settle_response(self, entry: PendingEntry, response: Any, protocol: Optional[str]) -> None:
        if not protocol or not self.registry.is_supported(protocol):
            self._settle(entry, mark_resolved, result=response)
            return
        try:
            validated = self.registry.validate_response(protocol, response)
        except Exception as e:
            logger.warning("Response validation failed for %s: %s", entry.request.correlation_id, e)
            self._settle(entry, mark_rejected, error=InvalidResponse(str(e)))
            return
        self._settle(entry, mark_resolved, result=DigitalCredential.create(protocol, validated, self.clock))

    async def _replay_native(self, entry: PendingEntry) -> None:
        try:
            result = await self.native.get(entry.request.options)
        except asyncio.CancelledError:
            self._settle(entry, mark_rejected, error=UserCancelled("Boundary closed"))
            raise
        except Exception as e:
            self._settle(entry, mark_rejected, error=e)
            return
        self._settle(entry, mark_resolved, result=result)

    def _settle(
        self,
        entry: PendingEntry,
        transition: Transition,
        *,
        result: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        """Apply a terminal transition and settle the caller's future once"""
        settled = transition(entry.request, self.clock)
        if isinstance(settled, Failure):
            logger.warning("Ignoring settlement: %s", settled.failure().message)
            return
        entry.request = settled.unwrap()
        logger.info("Request %s %s", entry.request.correlation_id, entry.request.status.value)

        if entry.future.done():
            return
        if error is not None:
            entry.future.set_exception(error)
        else:
            entry.future.set_result(result)
