from __future__ import annotations

import logging
from pathlib import Path

import pytest

from traceback_error.reporting.logging import LOGGER_NAME
from traceback_error.reporting.registry import REGISTRY

_ENV_OVERRIDES = (
    "TRACEBACK_ERRORS_DIR",
    "TRACEBACK_PROJECT_VAR",
    "TRACEBACK_COMPUTER_VAR",
    "TRACEBACK_USER_VAR",
    "TRACEBACK_LOG_DIR",
    "TRACEBACK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_reporting(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    # The fallback handler writes relative to cwd; keep it out of the repository.
    monkeypatch.chdir(tmp_path)
    for var in _ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)
    REGISTRY.clear()
    yield
    REGISTRY.clear()

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
