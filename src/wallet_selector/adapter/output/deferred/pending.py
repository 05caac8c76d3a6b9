"""Futures keyed by correlation id, resolved from outside the awaiting task"""

import asyncio
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")
D = TypeVar("D")


class DeferredError(Exception):
    """Base class for errors answering a deferred step"""

    pass


class NotPending(DeferredError):
    """Nothing is waiting under this correlation id"""

    def __init__(self, correlation_id: str):
        self.correlation_id = correlation_id
        super().__init__(f"Nothing pending for {correlation_id}")


class PendingFutures(Generic[D, T]):
    """
    correlation id -> (details, future).

    The awaiting side opens an entry and waits; the answering side looks up
    the details and resolves the future. Entries are closed by the awaiting
    side once it has its answer or was cancelled.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[D, "asyncio.Future[T]"]] = {}

    def open(self, correlation_id: str, details: D) -> "asyncio.Future[T]":
        if correlation_id in self._entries:
            raise ValueError(f"Already waiting for {correlation_id}")
        future: "asyncio.Future[T]" = asyncio.get_running_loop().create_future()
        self._entries[correlation_id] = (details, future)
        return future

    def close(self, correlation_id: str) -> None:
        self._entries.pop(correlation_id, None)

    def details(self, correlation_id: str) -> Optional[D]:
        entry = self._entries.get(correlation_id)
        return entry[0] if entry is not None else None

    def resolve(self, correlation_id: str, value: T) -> bool:
        """Set the answer; False if nothing is waiting or it was already answered"""
        entry = self._entries.get(correlation_id)
        if entry is None or entry[1].done():
            return False
        entry[1].set_result(value)
        return True

    def keys(self) -> List[str]:
        return [key for key, (_, future) in self._entries.items() if not future.done()]

    async def wait(self, correlation_id: str, details: D) -> T:
        future = self.open(correlation_id, details)
        try:
            return await future
        finally:
            self.close(correlation_id)
