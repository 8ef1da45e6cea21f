"""
reporting subpackage: how finished traceback errors get reported.

Key primitives
--------------
- ReportingConfig: errors directory, context variable names, log levels
- configure_logging(): rich console + optional file logging
- HandlerRegistry / SyncHandler / AsyncHandler: the single process-wide handler slot
- dispatch(): scope-exit dispatch of one record
- default_callback(): fallback writing one JSON file per error
- ErrorScope: context manager / decorator ending a propagating error's lifetime
"""

from .config import ConfigError, ReportingConfig, load_config, resolve_errors_dir
from .logging import configure_logging
from .registry import (
    REGISTRY,
    AsyncHandler,
    Handler,
    HandlerRegistry,
    SyncHandler,
    reset_traceback_callback,
    set_traceback_callback,
)
from .handlers import JsonlHandler, default_callback, set_traceback
from .dispatch import dispatch
from .guards import ErrorScope

__all__ = [
    "REGISTRY",
    "AsyncHandler",
    "ConfigError",
    "Handler",
    "HandlerRegistry",
    "JsonlHandler",
    "ReportingConfig",
    "SyncHandler",
    "configure_logging",
    "default_callback",
    "dispatch",
    "load_config",
    "ErrorScope",
    "reset_traceback_callback",
    "resolve_errors_dir",
    "set_traceback",
    "set_traceback_callback",
]
