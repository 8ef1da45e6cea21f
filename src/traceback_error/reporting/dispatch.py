"""
Scope-exit dispatch.

Run once when a record's owning scope ends. A record that is a parent, already
handled, or the empty placeholder is left alone; otherwise its contents are taken,
enriched with the origin context, marked handled, and given to the registered
handler (or to the JSON file fallback when none is registered).
"""

from __future__ import annotations

import logging
from typing import Optional

from traceback_error.core.poller import block_on
from traceback_error.core.record import TracebackError

from .config import ReportingConfig
from .handlers import default_callback
from .registry import REGISTRY, AsyncHandler, HandlerRegistry, SyncHandler

logger = logging.getLogger(__name__)


def dispatch(
    record: TracebackError,
    *,
    registry: Optional[HandlerRegistry] = None,
    config: Optional[ReportingConfig] = None,
) -> bool:
    """
    Report `record` unless it is exempt.

    Returns
    -------
    dispatched
        True if a handler (or the fallback) was invoked, False for a no-op.

    Notes
    -----
    The taken record is marked handled before any handler runs, so a handler that
    somehow finalizes it again cannot trigger a second dispatch. Exceptions raised
    by the handler are logged and not propagated: nothing past dispatch may fail.
    """
    if not record.is_dispatchable:
        return False

    cfg = config if config is not None else ReportingConfig.from_env()
    taken = record.take()
    taken.with_env_vars(cfg)
    taken.is_handled = True

    handler = (registry if registry is not None else REGISTRY).get()
    origin = f"{taken.file}:{taken.line}"
    try:
        if isinstance(handler, AsyncHandler):
            block_on(handler.callback(taken))
        elif isinstance(handler, SyncHandler):
            handler.callback(taken)
        else:
            default_callback(taken, cfg)
    except Exception:
        logger.exception("Traceback handler failed for error %r", taken.message, extra={"record_origin": origin})
    return True
