"""
Process-wide handler slot.

Holds at most one handler, either synchronous or asynchronous. Setting a handler
replaces the previous one (last writer wins); there is no fan-out.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Union

if TYPE_CHECKING:
    from traceback_error.core.record import TracebackError


@dataclass(frozen=True)
class SyncHandler:
    """Handler invoked directly with the dispatched record."""
    callback: Callable[["TracebackError"], None]


@dataclass(frozen=True)
class AsyncHandler:
    """Handler returning an awaitable that is driven to completion before dispatch returns."""
    callback: Callable[["TracebackError"], Awaitable[None]]


Handler = Union[SyncHandler, AsyncHandler]


class HandlerRegistry:
    """
    Single-slot, lock-guarded handler store.

    The lock only guards reads and writes of the slot; it is never held while a
    handler runs, so a handler may itself set or clear the slot.

    Usage example
    -------------
        registry = HandlerRegistry()
        registry.set(SyncHandler(print))
        registry.get()  # SyncHandler(callback=print)
        registry.clear()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handler: Optional[Handler] = None

    def set(self, handler: Handler) -> None:  # noqa: A003
        if not isinstance(handler, (SyncHandler, AsyncHandler)):
            raise TypeError(
                f"Handler must be SyncHandler or AsyncHandler, got {type(handler).__name__}"
            )
        with self._lock:
            self._handler = handler

    def clear(self) -> None:
        with self._lock:
            self._handler = None

    def get(self) -> Optional[Handler]:
        with self._lock:
            return self._handler


REGISTRY = HandlerRegistry()


def set_traceback_callback(handler: Handler) -> None:
    """Install `handler` in the process-wide registry."""
    REGISTRY.set(handler)


def reset_traceback_callback() -> None:
    """Empty the process-wide registry; dispatch falls back to the JSON file writer."""
    REGISTRY.clear()
