from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import ReportingConfig

LOGGER_NAME = "traceback_error"
LOG_FILENAME = "traceback_error.log"


class _OriginFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # Ensure `record_origin` exists for formatter
        if not hasattr(record, "record_origin"):
            setattr(record, "record_origin", "-")
        return True


def configure_logging(*, cfg: ReportingConfig) -> logging.Logger:
    """
    Configure console (stdout) + optional file logging for the library.

    Returns
    -------
    logger
        The configured ``traceback_error`` logger; module loggers propagate to it.

    Usage example
    -------------
        logger = configure_logging(cfg=ReportingConfig.from_env())
        logger.info("Hello")
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for flt in list(logger.filters):
        logger.removeFilter(flt)
    logger.propagate = False

    console_handler = RichHandler(console=Console(), show_path=False)
    console_handler.setLevel(cfg.console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.addFilter(_OriginFilter())
    logger.addHandler(console_handler)

    if cfg.log_dir is not None:
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(cfg.log_dir / LOG_FILENAME, encoding="utf-8")
        file_handler.setLevel(cfg.file_level)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)sZ | %(name)s | origin=%(record_origin)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        file_handler.addFilter(_OriginFilter())
        logger.addHandler(file_handler)

    logger.debug("Logging configured (errors_dir=%s, log_dir=%s)", str(cfg.errors_dir), str(cfg.log_dir))
    return logger
