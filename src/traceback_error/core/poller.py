"""
Minimal single-awaitable poller.

Drives one awaitable to completion on the calling thread, without an event loop.
It exists so an asynchronous error handler can run from the synchronous
scope-exit path, which must not return until the handler has finished.

Limitation
----------
Nothing ever wakes this poller. A pending result is simply polled again
(busy spin). A bare suspension (``await asyncio.sleep(0)``) is resumed on the
next poll; a yielded future is re-checked with ``done()`` until it reports done.
An awaitable that waits for a genuine external wake-up (e.g. ``asyncio.sleep(1)``
or network I/O driven by an event loop) therefore spins forever or fails. Async
handlers must make progress on their own.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Generator, Optional, TypeVar

T = TypeVar("T")


class PollerState(str, Enum):
    CREATED = "created"
    POLLING = "polling"
    READY = "ready"


class Poller:
    """
    Cooperative driver for exactly one awaitable.

    Usage example
    -------------
        poller = Poller(handler(err))
        while not poller.poll():
            pass
        poller.result
    """

    def __init__(self, awaitable: Awaitable[Any]) -> None:
        if not hasattr(awaitable, "__await__"):
            raise TypeError(f"Expected an awaitable, got {type(awaitable).__name__}")
        self._awaitable = awaitable
        self._iterator: Optional[Generator[Any, None, Any]] = None
        self._pending: Any = None
        self.state = PollerState.CREATED
        self.result: Any = None
        self.polls = 0

    def poll(self) -> bool:
        """Advance the awaitable by one step. Return True once it is ready."""
        if self.state == PollerState.READY:
            return True
        if self._iterator is None:
            self._iterator = self._awaitable.__await__()
            self.state = PollerState.POLLING
        self.polls += 1

        # A future yielded by the awaitable must not be resumed before it is done.
        if self._pending is not None:
            if not self._pending.done():
                return False
            self._pending = None

        try:
            yielded = self._iterator.send(None)
        except StopIteration as stop:
            self.result = stop.value
            self.state = PollerState.READY
            return True

        if yielded is not None and callable(getattr(yielded, "done", None)):
            self._pending = yielded
        return False


def block_on(awaitable: Awaitable[T]) -> T:
    """
    Drive `awaitable` to completion and return its value.

    Usage example
    -------------
        async def handler(err):
            await asyncio.sleep(0)

        block_on(handler(err))
    """
    poller = Poller(awaitable)
    while not poller.poll():
        continue
    return poller.result
