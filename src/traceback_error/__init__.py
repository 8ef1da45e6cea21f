"""Chained error records reported exactly once, when their scope ends."""

from .core import ErrorLevel, OtherLevel, TracebackError, block_on
from .reporting import (
    AsyncHandler,
    ReportingConfig,
    SyncHandler,
    configure_logging,
    default_callback,
    dispatch,
    ErrorScope,
    reset_traceback_callback,
    set_traceback,
    set_traceback_callback,
)
from .version import __version__

__all__ = [
    "AsyncHandler",
    "ErrorLevel",
    "OtherLevel",
    "ReportingConfig",
    "SyncHandler",
    "TracebackError",
    "__version__",
    "block_on",
    "configure_logging",
    "default_callback",
    "dispatch",
    "ErrorScope",
    "reset_traceback_callback",
    "set_traceback",
    "set_traceback_callback",
]
