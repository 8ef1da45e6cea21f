from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ErrorLevel(str, Enum):
    """Severity of a traceback error."""
    NONE = "None"
    UNKNOWN = "Unknown"
    LOG = "Log"
    DEBUG = "Debug"
    WARN = "Warn"
    ERROR = "Error"


@dataclass(frozen=True)
class OtherLevel:
    """
    Free-form severity for anything the fixed levels do not cover.

    Usage example
    -------------
        err = TracebackError("disk almost full", level=OtherLevel("capacity"))
    """
    text: str


Level = Union[ErrorLevel, OtherLevel]


def level_to_json(level: Level) -> Any:
    """Encode a level as ``"Unknown"`` style text, or ``{"Other": text}``."""
    if isinstance(level, OtherLevel):
        return {"Other": level.text}
    return level.value


def level_from_json(raw: Any) -> Level:
    if isinstance(raw, dict) and set(raw) == {"Other"}:
        return OtherLevel(str(raw["Other"]))
    if isinstance(raw, str):
        return ErrorLevel(raw)
    raise ValueError(f"Unrecognized error level: {raw!r}")
