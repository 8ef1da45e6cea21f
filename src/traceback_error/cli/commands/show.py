"""`traceback-error show` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path

from traceback_error.core.record import TracebackError
from traceback_error.core.types import level_to_json


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `show` command."""
    parser = subparsers.add_parser("show", help="Print a stored error record.")
    parser.add_argument("path", help="JSON file written by the fallback handler.")
    parser.add_argument("--json", action="store_true", help="Print the record as JSON instead.")
    parser.set_defaults(command="show")


def format_record(record: TracebackError) -> str:
    """Rendered chain followed by the record's time, level and origin context."""
    level = level_to_json(record.level)
    if isinstance(level, dict):
        level = f"Other({level['Other']})"
    lines = [
        record.render(),
        "",
        f"time:     {record.time_created.isoformat()}",
        f"level:    {level}",
        f"project:  {record.project}",
        f"computer: {record.computer}",
        f"user:     {record.user}",
    ]
    for item in record.extra_data:
        lines.append(f"extra:    {item}")
    return "\n".join(lines)


def run(args: argparse.Namespace) -> int:
    """Execute the `show` command."""
    path = Path(args.path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as error:
        print(f"Cannot read {path}: {error}")
        return 1
    try:
        record = TracebackError.from_json(text)
    except TracebackError as error:
        print(f"{path} is not a traceback error record: {error.message}")
        return 1

    print(record.to_json() if args.json else format_record(record))
    return 0
