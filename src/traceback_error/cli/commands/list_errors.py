"""`traceback-error list` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path

from traceback_error.core.record import TracebackError
from traceback_error.reporting.config import load_config, resolve_errors_dir


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `list` command."""
    parser = subparsers.add_parser("list", help="List stored error records.")
    parser.add_argument("--errors-dir", default=None, help="Directory holding error JSON files.")
    parser.set_defaults(command="list")


def run(args: argparse.Namespace) -> int:
    """Execute the `list` command."""
    config = getattr(args, "config", None)
    if config is None:
        config = load_config(Path.cwd())
    errors_dir = resolve_errors_dir(config, Path(args.errors_dir) if args.errors_dir else None)
    if not errors_dir.is_dir():
        print(f"No errors directory at {errors_dir}")
        return 0

    # File names start with the UTC timestamp, so name order is creation order.
    files = sorted(errors_dir.glob("*.json"))
    for path in files:
        try:
            record = TracebackError.from_json(path.read_text(encoding="utf-8"))
        except TracebackError as error:
            print(f"{path.name}: <unreadable: {error.message}>")
            continue
        print(f"{path.name}: {record.file}:{record.line}: {record.message}")
    print(f"{len(files)} error(s) in {errors_dir}")
    return 0
