"""Ready-made handlers and handler registration helpers."""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from traceback_error.core.record import TracebackError

from .config import ReportingConfig
from .registry import AsyncHandler, SyncHandler, set_traceback_callback

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def error_filename(now: Optional[datetime] = None) -> str:
    """File name for a dispatched record: ``<%Y-%m-%d.%H-%M-%S>.<nanoseconds>.json``."""
    now = now if now is not None else datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%d.%H-%M-%S")
    nanos = int(now.timestamp()) * 1_000_000_000 + now.microsecond * 1_000
    return f"{stamp}.{nanos}.json"


def default_callback(err: TracebackError, config: Optional[ReportingConfig] = None) -> Optional[Path]:
    """
    Fallback handler: write `err` as pretty JSON to a timestamped file under errors_dir.

    This runs on the scope-exit path, so every failure (directory creation,
    serialization, write) is logged and swallowed.

    Returns
    -------
    path
        The written file, or None if writing failed.
    """
    cfg = config if config is not None else ReportingConfig.from_env()
    errors_dir = cfg.errors_dir

    try:
        errors_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Error when creating directory %s: %s", errors_dir, exc)
        return None

    path = errors_dir / error_filename()
    logger.info("Writing error to file: %s", path, extra={"record_origin": f"{err.file}:{err.line}"})

    try:
        payload = err.to_json(indent=2)
    except (TypeError, ValueError) as exc:
        logger.error("Error when serializing error: %s", exc)
        return None

    try:
        with path.open("x", encoding="utf-8") as f:
            f.write(payload)
    except OSError as exc:
        logger.error("Error when writing to file %s: %s", path, exc)
        return None
    return path


@dataclass
class JsonlHandler:
    """
    Sync handler appending each dispatched record as one JSON line.

    Usage example
    -------------
        set_traceback_callback(SyncHandler(JsonlHandler(Path("logs/errors.jsonl"))))
    """
    path: Path

    def __call__(self, err: TracebackError) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(err.to_dict(), ensure_ascii=False) + "\n")


def set_traceback(callback: Optional[F] = None, *, is_async: Optional[bool] = None) -> Any:
    """
    Register a plain function as the process-wide handler.

    Coroutine functions are registered as AsyncHandler, anything else as
    SyncHandler; pass `is_async` to override the detection (e.g. for a callable
    object whose ``__call__`` returns an awaitable). Returns the callback unchanged,
    so it works as a decorator with or without arguments.

    Usage example
    -------------
        @set_traceback
        async def report(err: TracebackError) -> None:
            await asyncio.sleep(0)
            sink.append(err.to_dict())
    """

    def _register(fn: F) -> F:
        detected = inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
            getattr(fn, "__call__", None)
        )
        use_async = detected if is_async is None else is_async
        set_traceback_callback(AsyncHandler(fn) if use_async else SyncHandler(fn))
        return fn

    if callback is None:
        return _register
    return _register(callback)
