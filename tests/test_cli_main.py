from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from traceback_error.cli import main as cli_main


def test_build_arg_parser_accepts_all_registered_commands() -> None:
    parser = cli_main.build_arg_parser()
    for command in ("show", "list"):
        extra = ["errors/x.json"] if command == "show" else []
        args = parser.parse_args([command] + extra)
        assert args.command == command


def test_build_arg_parser_requires_add_subparser(monkeypatch: pytest.MonkeyPatch) -> None:
    bad_module = SimpleNamespace(run=lambda _args: 0)
    monkeypatch.setattr(cli_main, "_COMMANDS", {"bad": bad_module})
    with pytest.raises(RuntimeError, match="missing add_subparser"):
        cli_main.build_arg_parser()


def test_main_dispatches_to_selected_command(monkeypatch: pytest.MonkeyPatch) -> None:
    called: list[str] = []

    def _add_subparser(subparsers: object) -> None:
        parser = subparsers.add_parser("fake")  # type: ignore[attr-defined]
        parser.set_defaults(command="fake")

    def _run(args: object) -> int:
        called.append(str(args.command))  # type: ignore[attr-defined]
        return 3

    fake_module = SimpleNamespace(add_subparser=_add_subparser, run=_run)
    monkeypatch.setattr(cli_main, "_COMMANDS", {"fake": fake_module})

    assert cli_main.main(["fake"]) == 3
    assert called == ["fake"]


def test_main_requires_run_function(monkeypatch: pytest.MonkeyPatch) -> None:
    def _add_subparser(subparsers: object) -> None:
        parser = subparsers.add_parser("fake")  # type: ignore[attr-defined]
        parser.set_defaults(command="fake")

    fake_module = SimpleNamespace(add_subparser=_add_subparser)
    monkeypatch.setattr(cli_main, "_COMMANDS", {"fake": fake_module})

    with pytest.raises(RuntimeError, match="missing run"):
        cli_main.main(["fake"])


def _capture_command(monkeypatch: pytest.MonkeyPatch) -> list[object]:
    seen: list[object] = []

    def _add_subparser(subparsers: object) -> None:
        parser = subparsers.add_parser("fake")  # type: ignore[attr-defined]
        parser.set_defaults(command="fake")

    def _run(args: object) -> int:
        seen.append(args)
        return 0

    monkeypatch.setattr(cli_main, "_COMMANDS", {"fake": SimpleNamespace(add_subparser=_add_subparser, run=_run)})
    return seen


def test_main_loads_config_once_for_commands(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "traceback_error.yaml").write_text("reporting:\n  errors_dir: from_root\n", encoding="utf-8")
    seen = _capture_command(monkeypatch)

    assert cli_main.main(["--root", str(tmp_path), "fake"]) == 0

    args = seen[0]
    assert args.config == {"reporting": {"errors_dir": "from_root"}}  # type: ignore[attr-defined]
    assert args.reporting.errors_dir == Path("from_root")  # type: ignore[attr-defined]


def test_main_rejects_malformed_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    (tmp_path / "traceback_error.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    seen = _capture_command(monkeypatch)

    assert cli_main.main(["--root", str(tmp_path), "fake"]) == 2

    assert seen == []
    assert "Invalid configuration" in capsys.readouterr().out
