"""traceback-error command-line interface entrypoint."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from pathlib import Path
from types import ModuleType

from traceback_error.cli.commands import list_errors, show
from traceback_error.reporting.config import ConfigError, ReportingConfig, load_config
from traceback_error.reporting.logging import configure_logging

CommandModule = ModuleType
CommandRunner = Callable[[argparse.Namespace], int]

# Map CLI subcommands to their implementation modules.
_COMMANDS: dict[str, CommandModule] = {
    "show": show,
    "list": list_errors,
}


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="traceback-error",
        description="Inspect traceback error records written by the fallback handler.",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Directory searched for traceback_error.yaml (default: current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    for name, module in _COMMANDS.items():
        add_subparser = getattr(module, "add_subparser", None)
        if add_subparser is None:
            raise RuntimeError(f"CLI command module '{name}' is missing add_subparser().")
        add_subparser(subparsers)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Parse args, load the project config once and run the selected command.

    Commands receive the raw config mapping as ``args.config`` and the resolved
    ``ReportingConfig`` (environment, then config file) as ``args.reporting``.
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    command_name = str(args.command)

    module = _COMMANDS.get(command_name)
    if module is None:
        raise RuntimeError(f"Unknown command: {command_name}")

    runner: CommandRunner | None = getattr(module, "run", None)
    if runner is None:
        raise RuntimeError(f"CLI command module '{command_name}' is missing run().")

    try:
        config = load_config(Path(args.root))
        reporting = ReportingConfig.from_mapping(config, default=ReportingConfig.from_env())
    except ConfigError as error:
        print(f"Invalid configuration: {error}")
        return 2

    configure_logging(cfg=reporting)
    args.config = config
    args.reporting = reporting
    return runner(args)


# Keep console script compatibility with pyproject's entrypoint.
app = main


if __name__ == "__main__":
    raise SystemExit(main())
