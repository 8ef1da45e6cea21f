from __future__ import annotations

import functools
import inspect
from types import TracebackType
from typing import Any, Callable, Optional, TypeVar, cast

from traceback_error.core.record import TracebackError, as_traceback_error

from .dispatch import dispatch

F = TypeVar("F", bound=Callable[..., Any])


def _innermost_origin(tb: Optional[TracebackType]) -> tuple[Optional[str], Optional[int]]:
    if tb is None:
        return None, None
    while tb.tb_next is not None:
        tb = tb.tb_next
    return tb.tb_frame.f_code.co_filename, tb.tb_lineno


class ErrorScope:
    """
    Scope boundary where a propagating traceback error's lifetime ends.

    Behavior
    --------
    - A TracebackError (or any exception exposing ``as_traceback_error()``) leaving
      the block is dispatched and suppressed; the caller continues after the block.
    - Other exceptions propagate untouched, unless `adopt_foreign` is set: they are
      then adopted (origin = innermost traceback frame), dispatched and suppressed.
    - Exceptions that are not ``Exception`` subclasses (KeyboardInterrupt,
      SystemExit, ...) always propagate.
    - `last_dispatched` holds the message of the most recent record this scope
      dispatched (None until then).

    Usage example
    -------------
        with ErrorScope():
            load_everything()

        @ErrorScope(adopt_foreign=True)
        def main() -> None:
            ...
    """

    def __init__(self, *, adopt_foreign: bool = False) -> None:
        self.adopt_foreign = adopt_foreign
        self.last_dispatched: Optional[str] = None

    def __call__(self, func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                async with self:
                    return await func(*args, **kwargs)

            return cast(F, async_wrapper)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return cast(F, sync_wrapper)

    def __enter__(self) -> "ErrorScope":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        return self._handle(exc, tb)

    async def __aenter__(self) -> "ErrorScope":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        return self._handle(exc, tb)

    def _handle(self, exc: Optional[BaseException], tb: Optional[TracebackType]) -> bool:
        if not isinstance(exc, Exception):
            return False

        record = as_traceback_error(exc)
        if record is None:
            if not self.adopt_foreign:
                return False
            file, line = _innermost_origin(tb)
            record = TracebackError.adopt(exc, file=file, line=line)

        message = record.message
        if dispatch(record):
            self.last_dispatched = message
        return True
