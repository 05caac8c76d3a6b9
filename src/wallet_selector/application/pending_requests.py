"""Pending request table owned by the interception boundary"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from wallet_selector.domain import CredentialRequest

logger = logging.getLogger(__name__)


@dataclass
class PendingEntry:
    """
    A request waiting for its credentials_response.

    Attributes:
        request: Request state
        future: Settled with the caller's result or error
        timer: Request window timer; None once disarmed
    """

    request: CredentialRequest
    future: "asyncio.Future[Any]"
    timer: Optional[asyncio.TimerHandle] = None

    def disarm(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


class PendingRequestTable:
    """
    correlation id -> PendingEntry.

    Each id has at most one entry. ``pop`` removes an entry and cancels its
    timer; popping an unknown id returns None.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, PendingEntry] = {}

    def register(self, entry: PendingEntry) -> None:
        correlation_id = str(entry.request.correlation_id)
        if correlation_id in self._entries:
            raise ValueError(f"Correlation id already pending: {correlation_id}")
        self._entries[correlation_id] = entry

    def get(self, correlation_id: str) -> Optional[PendingEntry]:
        return self._entries.get(correlation_id)

    def disarm_timer(self, correlation_id: str) -> bool:
        """Cancel the request window timer; the entry stays pending"""
        entry = self._entries.get(correlation_id)
        if entry is None:
            return False
        entry.disarm()
        return True

    def pop(self, correlation_id: str) -> Optional[PendingEntry]:
        entry = self._entries.pop(correlation_id, None)
        if entry is not None:
            entry.disarm()
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, correlation_id: object) -> bool:
        return correlation_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
