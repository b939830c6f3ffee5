"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

import run


def test_defaults() -> None:
    args = run.build_arg_parser().parse_args(["game.ch8"])

    assert args.program == Path("game.ch8")
    assert args.frontend == "pygame"
    assert args.scale == 10
    assert args.clock == 600
    assert args.seed is None
    assert not args.fullscreen
    assert not args.disassemble


def test_disassemble_lists_program(tmp_path: Path, capsys) -> None:
    path = tmp_path / "demo.ch8"
    path.write_bytes(bytes.fromhex("00E0A2F0D0155121"))

    assert run.main([str(path), "--disassemble"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "200: 00E0  CLS",
        "202: A2F0  LD I, 0x2f0",
        "204: D015  DRW V0, V1, 5",
        "206: 5121  DW 0x5121",
    ]


def test_missing_program_is_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main([str(tmp_path / "missing.ch8")])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("flag", ["--scale=0", "--clock=-5"])
def test_non_positive_options_rejected(tmp_path: Path, flag: str) -> None:
    path = tmp_path / "demo.ch8"
    path.write_bytes(b"\x12\x00")

    with pytest.raises(SystemExit):
        run.main([str(path), flag])


def test_unknown_frontend_choice(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        run.build_arg_parser().parse_args(["x.ch8", "--frontend", "curses"])


def test_palette_choices() -> None:
    args = run.build_arg_parser().parse_args(["x.ch8", "--palette", "monochrome"])

    assert args.palette == "monochrome"
    assert run.build_arg_parser().parse_args(["x.ch8"]).palette == "phosphor"
