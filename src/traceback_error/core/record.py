"""
The traceback error record: a chained, serializable error with file/line provenance.

A record is reported exactly once, when its owning scope ends (see
``TracebackError.finalize`` and ``traceback_error.reporting.guards.ErrorScope``),
unless it became the parent of another record, was already handled, or is the
empty placeholder produced by ``TracebackError.empty()``.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from types import TracebackType
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional

from .context import read_origin_context
from .types import ErrorLevel, Level, level_from_json, level_to_json

if TYPE_CHECKING:
    from traceback_error.reporting.config import ReportingConfig

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
DEFAULT_MESSAGE = "Default message"


def _caller_origin(depth: int) -> tuple[str, int]:
    frame = sys._getframe(depth + 1)
    return frame.f_code.co_filename, frame.f_lineno


def _format_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_time(raw: str) -> datetime:
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


def as_traceback_error(exc: BaseException) -> Optional["TracebackError"]:
    """Return the record `exc` exposes through ``as_traceback_error()``, if any."""
    probe = getattr(exc, "as_traceback_error", None)
    if not callable(probe):
        return None
    record = probe()
    return record if isinstance(record, TracebackError) else None


class TracebackError(Exception):
    """
    A chainable error record.

    Parameters
    ----------
    message
        What failed at this step.
    file, line
        Origin of the record. Captured from the caller's frame when omitted.
    level
        Severity, ``ErrorLevel.UNKNOWN`` by default.
    stacklevel
        How many frames above the caller to take the origin from (subclasses
        calling ``super().__init__`` pass 2).

    Usage example
    -------------
        try:
            cfg = load(path)
        except TracebackError as err:
            raise TracebackError(f"could not load {path}").with_parent(err)

        with ErrorScope():
            main()
    """

    def __init__(
        self,
        message: str = "",
        *,
        file: Optional[str] = None,
        line: Optional[int] = None,
        level: Level = ErrorLevel.UNKNOWN,
        stacklevel: int = 1,
    ) -> None:
        super().__init__(message)
        if file is None or line is None:
            caller_file, caller_line = _caller_origin(stacklevel)
            file = caller_file if file is None else file
            line = caller_line if line is None else line
        self.message = message
        self.file = file
        self.line = line
        self.parent: Optional[TracebackError] = None
        self.time_created = datetime.now(timezone.utc)
        self.extra_data: list[Any] = []
        self.project: Optional[str] = None
        self.computer: Optional[str] = None
        self.user: Optional[str] = None
        self.is_parent = False
        self.is_handled = False
        self.level = level
        self._is_default = False

    def _set_default_fields(self) -> None:
        self.message = DEFAULT_MESSAGE
        self.file = __file__
        self.line = 0
        self.parent = None
        self.time_created = EPOCH
        self.extra_data = []
        self.project = None
        self.computer = None
        self.user = None
        self.is_parent = False
        self.is_handled = False
        self.level = ErrorLevel.LOG
        self._is_default = True
        self.args = (self.message,)
        self.__cause__ = None

    @classmethod
    def empty(cls) -> "TracebackError":
        """Placeholder record. Never dispatched until a ``with_*`` call clears its default flag."""
        record = cls.__new__(cls)
        record._set_default_fields()
        return record

    @classmethod
    def adopt(
        cls,
        exc: BaseException,
        message: Optional[str] = None,
        *,
        file: Optional[str] = None,
        line: Optional[int] = None,
        level: Level = ErrorLevel.UNKNOWN,
    ) -> "TracebackError":
        """
        Wrap an arbitrary exception in a new record.

        If `exc` exposes itself as one of ours, it is marked handled and becomes the
        parent of the new record (whose message defaults to the original one).
        Otherwise its chain cannot be recovered, so its text is flattened into
        ``extra_data``.

        Usage example
        -------------
            try:
                json.loads(raw)
            except ValueError as exc:
                raise TracebackError.adopt(exc, "config is not valid JSON") from exc
        """
        if file is None or line is None:
            caller_file, caller_line = _caller_origin(1)
            file = caller_file if file is None else file
            line = caller_line if line is None else line

        ours = as_traceback_error(exc)
        if ours is not None:
            ours.is_handled = True
            text = ours.message if message is None else message
            return cls(text, file=file, line=line, level=level).with_parent(ours)

        text = "" if message is None else message
        return cls(text, file=file, line=line, level=level).with_extra_data(
            {"error": str(exc), "error_type": type(exc).__name__}
        )

    @classmethod
    def decode_error(cls, message: str) -> "TracebackError":
        return cls(message, file="", line=0, level=ErrorLevel.LOG).with_extra_data(
            {"error_type": "decode", "error_message": message}
        )

    # ----------------------------------------------------------------------------------------------
    # Chain building
    # ----------------------------------------------------------------------------------------------

    def with_extra_data(self, value: Any) -> "TracebackError":
        """Append a structured value; most recent context goes last."""
        self._is_default = False
        self.extra_data.append(value)
        return self

    def with_env_vars(self, config: Optional["ReportingConfig"] = None) -> "TracebackError":
        """Fill project/computer/user from the environment variables named by `config`."""
        if config is None:
            from traceback_error.reporting.config import ReportingConfig

            config = ReportingConfig.from_env()
        ctx = read_origin_context(
            project_var=config.project_var,
            computer_var=config.computer_var,
            user_var=config.user_var,
        )
        self._is_default = False
        self.project = ctx.project
        self.computer = ctx.computer
        self.user = ctx.user
        return self

    def with_parent(self, parent: "TracebackError") -> "TracebackError":
        """Install `parent` as the cause of this record. The parent is never dispatched itself."""
        if not isinstance(parent, TracebackError):
            raise TypeError(f"Parent must be a TracebackError, got {type(parent).__name__}")
        if parent.is_parent:
            raise ValueError("Record is already the parent of another record")
        if any(rec is self for rec in parent.chain()):
            raise ValueError("Attaching this parent would create a cycle")

        parent._is_default = False
        parent.is_parent = True
        self._is_default = False
        self.parent = parent
        self.__cause__ = parent
        return self

    def chain(self) -> Iterator["TracebackError"]:
        """Yield this record, then its parent, grandparent, ..."""
        rec: Optional[TracebackError] = self
        while rec is not None:
            yield rec
            rec = rec.parent

    def as_traceback_error(self) -> "TracebackError":
        return self

    # ----------------------------------------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------------------------------------

    @property
    def is_dispatchable(self) -> bool:
        """True while none of parent / handled / default applies."""
        return not (self.is_parent or self.is_handled or self._is_default)

    def take(self) -> "TracebackError":
        """Move the contents into a new record, leaving the empty placeholder behind."""
        taken = type(self).__new__(type(self))
        taken.__dict__.update(self.__dict__)
        taken.args = self.args
        taken.__cause__ = self.__cause__
        self.__dict__.clear()
        self._set_default_fields()
        return taken

    def finalize(self) -> bool:
        """End this record's scope: dispatch it unless it is exempt. Idempotent."""
        from traceback_error.reporting.dispatch import dispatch

        return dispatch(self)

    def __enter__(self) -> "TracebackError":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        # Raising the record itself hands it to the caller; its scope has not ended.
        if exc is None or as_traceback_error(exc) is not self:
            self.finalize()
        return False

    # ----------------------------------------------------------------------------------------------
    # Rendering / serialization
    # ----------------------------------------------------------------------------------------------

    def render(self) -> str:
        """
        Render the chain outermost cause first.

        Line ``i`` is indented by ``i`` tabs; the record's own line comes last,
        without a trailing newline::

            a.py:3: disk read failed
            \tb.py:10: could not load config
            \t\tmain.py:5: startup failed
        """
        records = list(self.chain())
        records.reverse()
        return "\n".join(
            "\t" * depth + f"{rec.file}:{rec.line}: {rec.message}" for depth, rec in enumerate(records)
        )

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"TracebackError(message={self.message!r}, file={self.file!r}, line={self.line!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TracebackError):
            return NotImplemented
        return (
            self.message == other.message
            and self.file == other.file
            and self.line == other.line
            and self.parent == other.parent
            and self.extra_data == other.extra_data
            and self.project == other.project
            and self.computer == other.computer
            and self.user == other.user
        )

    def __hash__(self) -> int:
        return hash((self.message, self.file, self.line))

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "parent": self.parent.to_dict() if self.parent is not None else None,
            "time_created": _format_time(self.time_created),
            "extra_data": list(self.extra_data),
            "project": self.project,
            "computer": self.computer,
            "user": self.user,
            "is_parent": self.is_parent,
            "is_handled": self.is_handled,
            "level": level_to_json(self.level),
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TracebackError":
        """
        Rebuild a record from its JSON shape.

        Lifecycle flags are restored as stored. Malformed input raises a
        ``TracebackError`` built by ``decode_error``.
        """
        try:
            record = cls(
                str(data["message"]),
                file=str(data["file"]),
                line=int(data["line"]),
                level=level_from_json(data.get("level", ErrorLevel.UNKNOWN.value)),
            )
            record.time_created = _parse_time(str(data["time_created"]))
            record.extra_data = list(data.get("extra_data") or [])
            record.project = data.get("project")
            record.computer = data.get("computer")
            record.user = data.get("user")
            record.is_parent = bool(data.get("is_parent", False))
            record.is_handled = bool(data.get("is_handled", False))
            parent = data.get("parent")
        except (KeyError, TypeError, ValueError) as exc:
            raise cls.decode_error(f"Invalid traceback error record: {exc}") from exc

        if parent is not None:
            if not isinstance(parent, Mapping):
                raise cls.decode_error(f"Invalid parent record: {parent!r}")
            record.parent = cls.from_dict(parent)
            record.__cause__ = record.parent
        return record

    @classmethod
    def from_json(cls, text: str) -> "TracebackError":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise cls.decode_error(f"Invalid JSON: {exc}") from exc
        if not isinstance(data, Mapping):
            raise cls.decode_error(f"Expected a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)
