"""Message relay between the interception boundary and the coordinator

The two sides never share state; every interaction is an Envelope pushed
onto one of two FIFO queues. Delivery is at-most-once: there is no retry,
and an envelope whose handler raises is dropped.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from wallet_selector.domain import Envelope

logger = logging.getLogger(__name__)

EnvelopeHandler = Callable[[Envelope], Union[None, Awaitable[None]]]


class Direction(str, Enum):
    """Destination of an envelope"""

    TO_COORDINATOR = "to_coordinator"
    TO_BOUNDARY = "to_boundary"


class MessageRelay:
    """
    Two one-way FIFO channels, each drained by its own pump task.

    Handlers are called in queue order; an async handler is awaited before
    the next envelope of the same direction is delivered.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Direction, Optional[EnvelopeHandler]] = {
            Direction.TO_COORDINATOR: None,
            Direction.TO_BOUNDARY: None,
        }
        self._queues: Dict[Direction, "asyncio.Queue[Envelope]"] = {}
        self._pumps: List["asyncio.Task[None]"] = []

    @property
    def running(self) -> bool:
        return bool(self._pumps)

    # ======================
    # Lifecycle
    # ======================

    async def start(self) -> None:
        """Create the queues and start one pump per direction"""
        if self.running:
            return
        for direction in Direction:
            queue: "asyncio.Queue[Envelope]" = asyncio.Queue()
            self._queues[direction] = queue
            self._pumps.append(asyncio.create_task(self._pump(direction, queue), name=f"relay-{direction.value}"))
        logger.info("Message relay started")

    async def stop(self) -> None:
        """Stop the pumps; undelivered envelopes are discarded"""
        pumps, self._pumps = self._pumps, []
        for pump in pumps:
            pump.cancel()
        await asyncio.gather(*pumps, return_exceptions=True)
        for direction, queue in self._queues.items():
            if not queue.empty():
                logger.warning("Discarding %d undelivered envelope(s) %s", queue.qsize(), direction.value)
        self._queues.clear()
        logger.info("Message relay stopped")

    async def join(self) -> None:
        """Wait until every envelope queued so far has been handled"""
        for queue in list(self._queues.values()):
            await queue.join()

    # ======================
    # Handlers
    # ======================

    def attach_coordinator(self, handler: EnvelopeHandler) -> None:
        self._handlers[Direction.TO_COORDINATOR] = handler

    def attach_boundary(self, handler: EnvelopeHandler) -> None:
        self._handlers[Direction.TO_BOUNDARY] = handler

    def detach_coordinator(self) -> None:
        self._handlers[Direction.TO_COORDINATOR] = None

    def detach_boundary(self) -> None:
        self._handlers[Direction.TO_BOUNDARY] = None

    # ======================
    # Sending
    # ======================

    def send_to_coordinator(self, envelope: Envelope) -> bool:
        return self._send(Direction.TO_COORDINATOR, envelope)

    def send_to_boundary(self, envelope: Envelope) -> bool:
        return self._send(Direction.TO_BOUNDARY, envelope)

    def _send(self, direction: Direction, envelope: Envelope) -> bool:
        """Queue an envelope; returns False when it was dropped"""
        queue = self._queues.get(direction)
        if queue is None or not self.running:
            logger.warning("Relay stopped, dropping %s for %s", envelope.kind.value, envelope.correlation_id)
            return False
        if self._handlers[direction] is None:
            logger.warning(
                "No handler %s, dropping %s for %s", direction.value, envelope.kind.value, envelope.correlation_id
            )
            return False
        logger.debug("Relaying %s for %s %s", envelope.kind.value, envelope.correlation_id, direction.value)
        queue.put_nowait(envelope)
        return True

    async def _pump(self, direction: Direction, queue: "asyncio.Queue[Envelope]") -> None:
        while True:
            envelope = await queue.get()
            try:
                handler = self._handlers[direction]
                if handler is None:
                    logger.warning("Handler detached, dropping %s for %s", envelope.kind.value, envelope.correlation_id)
                    continue
                result: Any = handler(envelope)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Handler failed for %s %s, envelope dropped", envelope.kind.value, envelope.correlation_id)
            finally:
                queue.task_done()
