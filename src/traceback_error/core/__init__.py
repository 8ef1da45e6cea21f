"""
core subpackage: the error record and the machinery it needs to be reported.

- TracebackError: chained, serializable error record with lifecycle flags
- ErrorLevel / OtherLevel: severity
- read_origin_context(): project / computer / user from the environment
- block_on(): minimal poller used to run async handlers from sync code
"""

from .context import OriginContext, read_origin_context
from .poller import Poller, PollerState, block_on
from .record import TracebackError, as_traceback_error
from .types import ErrorLevel, Level, OtherLevel

__all__ = [
    "ErrorLevel",
    "Level",
    "OriginContext",
    "OtherLevel",
    "Poller",
    "PollerState",
    "TracebackError",
    "as_traceback_error",
    "block_on",
    "read_origin_context",
]
