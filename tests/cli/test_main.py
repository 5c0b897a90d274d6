# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the RedTopo CLI entry point."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from redtopo.cli.main import main
from redtopo.runtime.snapshot import read_snapshot

# ###############
# Helpers
# ###############

_PROGRAM = """\
programa lab;
define maquinas pc1;
define concentradores hub = 4;
inicio
  coloca(hub, 5, 5);
  coloca(pc1, 0, 0);
  uneMaquinaPuerto(pc1, hub, 1);
  escribe(hub.disponibles);
fin.
"""


def _run_cli(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    """Run main() with *args* and return its exit code."""
    monkeypatch.setattr(sys, "argv", ["redtopo", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


def _write_program(tmp_path: Path, text: str = _PROGRAM, name: str = "lab.topo") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# ###############
# Public Interface
# ###############


def test_main_no_args_prints_help_and_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run_cli(monkeypatch) == 0


# -------- init tests --------


def test_init_creates_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init writes redtopo.yaml in the specified directory."""
    assert _run_cli(monkeypatch, "init", str(tmp_path)) == 0
    content = (tmp_path / "redtopo.yaml").read_text(encoding="utf-8")
    assert "snapshot-directory: .redtopo" in content


def test_init_default_directory_uses_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init with no directory argument uses the current working directory."""
    monkeypatch.chdir(tmp_path)
    assert _run_cli(monkeypatch, "init") == 0
    assert (tmp_path / "redtopo.yaml").exists()


def test_init_fails_if_config_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init exits with error code 1 when a configuration already exists."""
    (tmp_path / "redtopo.yaml").write_text("color: true\n", encoding="utf-8")
    assert _run_cli(monkeypatch, "init", str(tmp_path)) == 1


def test_init_fails_if_directory_does_not_exist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init exits with error code 1 when target directory does not exist."""
    assert _run_cli(monkeypatch, "init", str(tmp_path / "nonexistent")) == 1


# -------- tokens tests --------


def test_tokens_lists_each_token(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """tokens prints one line per token with its kind and lexeme."""
    path = _write_program(tmp_path, "programa t;")
    assert _run_cli(monkeypatch, "tokens", str(path)) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert lines[0].split() == ["1:1", "PROGRAMA", "programa"]
    assert lines[-1].split()[1] == "EOF"


def test_tokens_reports_lexical_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A lexical error is rendered to stderr with exit code 1."""
    path = _write_program(tmp_path, "programa t; @")
    assert _run_cli(monkeypatch, "--no-color", "tokens", str(path)) == 1
    err = capsys.readouterr().err
    assert err.startswith("error[léxico]")
    assert f"{path}:1:13" in err


def test_tokens_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A source file that cannot be read exits with code 1."""
    assert _run_cli(monkeypatch, "tokens", str(tmp_path / "missing.topo")) == 1


# -------- table tests --------


def test_table_prints_listing(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """table prints the productions and the table cells."""
    assert _run_cli(monkeypatch, "table") == 0
    assert "M[Programa, 'programa'] = 1" in capsys.readouterr().out


def test_table_writes_output_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """table --output writes the listing to a file."""
    output = tmp_path / "ll1.txt"
    assert _run_cli(monkeypatch, "table", "--output", str(output)) == 0
    assert "M[Programa, 'programa'] = 1" in output.read_text(encoding="utf-8")


def test_table_unwritable_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """table exits with code 1 when the output cannot be written."""
    assert _run_cli(monkeypatch, "table", "--output", str(tmp_path / "missing" / "ll1.txt")) == 1


# -------- check tests --------


def test_check_valid_program(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """check summarizes the declarations of a valid program."""
    path = _write_program(tmp_path)
    assert _run_cli(monkeypatch, "--no-color", "check", str(path)) == 0
    out = capsys.readouterr().out
    assert "Máquinas: pc1" in out
    assert "Concentradores: hub(4)" in out
    assert "Coaxiales: -" in out
    assert out.rstrip().endswith("No issues found.")


def test_check_reports_all_semantic_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """check renders every semantic error and exits with code 1."""
    path = _write_program(tmp_path, "programa t; define concentradores h = 6; define coaxial c = 600; inicio fin.")
    assert _run_cli(monkeypatch, "--no-color", "check", str(path)) == 1
    assert capsys.readouterr().err.count("error[semántico]") == 2


def test_check_syntax_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A syntax error is reported once with exit code 1."""
    path = _write_program(tmp_path, "programa t inicio fin.")
    assert _run_cli(monkeypatch, "--no-color", "check", str(path)) == 1
    assert capsys.readouterr().err.count("error[sintáctico]") == 1


def test_check_invalid_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """An invalid workspace configuration next to the source exits with code 1."""
    (tmp_path / "redtopo.yaml").write_text("color: [\n", encoding="utf-8")
    path = _write_program(tmp_path)
    assert _run_cli(monkeypatch, "check", str(path)) == 1


def test_check_explicit_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """--config points at a configuration file elsewhere."""
    config = tmp_path / "conf" / "redtopo.yaml"
    config.parent.mkdir()
    config.write_text("automaton: missing.aut\n", encoding="utf-8")
    path = _write_program(tmp_path)
    assert _run_cli(monkeypatch, "--config", str(config), "check", str(path)) == 1


# -------- run tests --------


def test_run_prints_output_and_network(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """run prints the program output followed by the network report."""
    path = _write_program(tmp_path)
    assert _run_cli(monkeypatch, "--no-color", "run", str(path)) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "3"
    assert lines[1] == "Red 'lab'"
    assert "  máquina pc1 (0, 0) -> hub[1]" in lines
    assert "  concentrador hub (5, 5) 3/4 libres" in lines


def test_run_runtime_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A runtime error is rendered and exits with code 1."""
    source = _PROGRAM.replace("escribe(hub.disponibles);", "uneMaquinaPuerto(hub, hub, 2);")
    path = _write_program(tmp_path, source)
    assert _run_cli(monkeypatch, "--no-color", "run", str(path)) == 1
    assert "error[ejecución]" in capsys.readouterr().err


def test_run_snapshot_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """run --snapshot stores the snapshot in the configured directory."""
    (tmp_path / "redtopo.yaml").write_text("snapshot-directory: snaps\n", encoding="utf-8")
    path = _write_program(tmp_path)
    assert _run_cli(monkeypatch, "run", str(path), "--snapshot") == 0
    snapshot = read_snapshot(tmp_path / "snaps" / "lab.redtopo.json")
    assert snapshot.program == "lab"
    assert snapshot.output == ("3",)


def test_run_snapshot_explicit_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """run --snapshot PATH writes the snapshot to PATH."""
    path = _write_program(tmp_path)
    target = tmp_path / "out.json"
    assert _run_cli(monkeypatch, "run", str(path), "--snapshot", str(target)) == 0
    assert read_snapshot(target).concentrators[0].available == 3


def test_run_serve_launches_viewer(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """run --serve starts the viewer on the requested host and port."""
    path = _write_program(tmp_path)
    app = MagicMock()
    with patch("redtopo.webui.app.create_app", return_value=app) as create_app:
        assert _run_cli(monkeypatch, "run", str(path), "--serve", "--port", "9000") == 0
    assert create_app.call_args.args[0].program == "lab"
    app.run.assert_called_once_with(host="127.0.0.1", port=9000, debug=False)
