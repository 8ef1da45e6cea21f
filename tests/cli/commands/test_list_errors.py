from __future__ import annotations

import argparse
from pathlib import Path

from traceback_error.cli.commands import list_errors
from traceback_error.core.record import TracebackError
from traceback_error.reporting.config import ReportingConfig
from traceback_error.reporting.handlers import default_callback


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    subparsers = parser.add_subparsers(dest="command", required=True)
    list_errors.add_subparser(subparsers)
    return parser


def test_add_subparser_registers_list_command() -> None:
    args = _parser().parse_args(["list", "--errors-dir", "somewhere"])
    assert args.command == "list"
    assert args.errors_dir == "somewhere"


def test_list_prints_stored_records(tmp_path: Path, capsys) -> None:
    cfg = ReportingConfig(errors_dir=tmp_path / "errs")
    default_callback(TracebackError("first failure", file="a.py", line=1), cfg)
    (tmp_path / "errs" / "zz-garbage.json").write_text("nope", encoding="utf-8")

    assert list_errors.run(_parser().parse_args(["list", "--errors-dir", str(tmp_path / "errs")])) == 0

    out = capsys.readouterr().out
    assert "a.py:1: first failure" in out
    assert "zz-garbage.json: <unreadable" in out
    assert "2 error(s)" in out


def test_list_uses_config_file(tmp_path: Path, capsys) -> None:
    (tmp_path / "traceback_error.yaml").write_text("reporting:\n  errors_dir: from_file\n")
    default_callback(TracebackError("configured", file="a.py", line=1), ReportingConfig(errors_dir=Path("from_file")))

    assert list_errors.run(_parser().parse_args(["list"])) == 0

    assert "configured" in capsys.readouterr().out


def test_list_without_directory(capsys) -> None:
    assert list_errors.run(_parser().parse_args(["list"])) == 0
    assert "No errors directory" in capsys.readouterr().out


def test_list_prefers_config_passed_by_the_entrypoint(tmp_path: Path, capsys) -> None:
    default_callback(TracebackError("handed over", file="a.py", line=1), ReportingConfig(errors_dir=tmp_path / "given"))
    args = _parser().parse_args(["list"])
    args.config = {"reporting": {"errors_dir": str(tmp_path / "given")}}

    assert list_errors.run(args) == 0

    assert "handed over" in capsys.readouterr().out
