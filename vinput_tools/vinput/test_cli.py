#!/usr/bin/env python3
"""
Tests for the vinput command-line interface
"""

import io
from pathlib import Path

import pytest

from .cli import main
from .desktop import desktops
from .desktop.desktop import DesktopUnavailableError


def write_script(tmp_path: Path, source: str, name: str = "script.vin") -> str:
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return str(path)


def unavailable_factory():
    raise DesktopUnavailableError("pynput", "no display")


def test_no_command(capsys: pytest.CaptureFixture) -> None:
    assert main([]) == 1
    assert "usage:" in capsys.readouterr().out


def test_play_dry_run(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    script = write_script(tmp_path, r"a\[@5,6]\?")
    assert main(["play", "--desktop", "dry-run", "--no-rand-sleep", script]) == 0

    assert capsys.readouterr().out == (
        "* press       key <a>\n"
        "* release     key <a>\n"
        "* move pointer to (5,6)\n"
        "(5,6)\n"
    )


def test_play_verbose(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    script = write_script(tmp_path, "a")
    assert main(["play", "--desktop", "dry-run", "--seed", "3", "-v", script]) == 0
    assert capsys.readouterr().out.startswith("0x0000: KEY_CLICK a\n* press")


def test_play_several_files(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    first = write_script(tmp_path, "a", "first.vin")
    second = write_script(tmp_path, "b", "second.vin")
    assert main(["play", "--desktop", "dry-run", "--no-rand-sleep", first, second]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("<a>")
    assert lines[2].endswith("<b>")


def test_play_syntax_error(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    script = write_script(tmp_path, "ab\n\\[$NOPE]")
    assert main(["play", "--desktop", "dry-run", script]) == 1
    assert capsys.readouterr().out == (
        f"Syntax error in {script} at line 2, column 1: Unknown key: NOPE\n"
    )


def test_play_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["play", "--desktop", "dry-run", str(tmp_path / "missing.vin")]) == 1
    assert capsys.readouterr().out.startswith("Error reading")


def test_play_without_desktop(
    tmp_path: Path, capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setitem(desktops.DESKTOP_FACTORIES, "pynput", unavailable_factory)
    script = write_script(tmp_path, "a")
    assert main(["play", script]) == 1
    assert capsys.readouterr().out == "Error: vinput: cannot find available desktop\n"


def test_disassemble_stdin(
    capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("a b"))
    assert main(["disassemble", "--ignore-space", "-"]) == 0
    assert capsys.readouterr().out == "0x0000: KEY_CLICK a\n0x0001: KEY_CLICK b\n"


def test_disassemble_reads_stdin_by_default(
    capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(r"\[@1,2]"))
    assert main(["disassemble"]) == 0
    assert capsys.readouterr().out == (
        "0x0000: POINTER_GOTO #0 (1,2)\n\n1 positions\n"
    )


def test_help_script(capsys: pytest.CaptureFixture) -> None:
    assert main(["help-script"]) == 0
    out = capsys.readouterr().out
    assert "KEY_NAME" in out
    assert '"SCROLL_DOWN"' in out


def test_list_desktops(
    capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setitem(desktops.DESKTOP_FACTORIES, "pynput", unavailable_factory)
    assert main(["list-desktops"]) == 0
    assert capsys.readouterr().out == (
        "Desktop backends:\n"
        "  pynput     not available (no display)\n"
        "  dry-run    available\n"
    )
