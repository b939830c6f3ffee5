"""Tests for the environment-driven debug logging."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from pychip8.utils import debug
from pychip8.utils.trace import TraceRecorder


@pytest.fixture(autouse=True)
def _fresh_categories():
    debug.reset_categories()
    yield
    debug.reset_categories()


def test_disabled_without_environment(monkeypatch, capsys) -> None:
    monkeypatch.delenv(debug.ENV_VAR, raising=False)

    assert not debug.debug_enabled("cpu")
    debug.debug_log("cpu", "hidden")
    assert capsys.readouterr().out == ""


def test_selected_categories(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "CPU, input")

    assert debug.debug_enabled("cpu")
    assert debug.debug_enabled("input")
    assert not debug.debug_enabled("audio")

    debug.debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_enables_everything(monkeypatch) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "all")

    assert debug.debug_enabled("perf")
    assert debug.debug_enabled()


def test_bad_format_arguments_are_appended(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "app")

    debug.debug_log("app", "value=%d", "text")
    assert capsys.readouterr().out == "[CHIP8][app] value=%d ('text',)\n"


def test_trace_dump_goes_through_debug_log(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "trace")
    recorder = TraceRecorder(2)
    state = SimpleNamespace(pc=0x200, index=0, sp=0, delay_timer=0, sound_timer=0, registers=[0] * 16)
    recorder.record_step(state, 0x00E0, mnemonic="CLS")

    recorder.dump("trace")

    out = capsys.readouterr().out
    assert out.startswith("[CHIP8][trace] pc=200 opcode=00E0 CLS")


def test_parse_categories_ignores_blanks() -> None:
    assert debug.parse_categories(" Cpu,,perf , ") == frozenset({"cpu", "perf"})
    assert debug.parse_categories("") == frozenset()


def test_categories_are_read_once(monkeypatch) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "cpu")
    assert debug.enabled_categories() == frozenset({"cpu"})

    monkeypatch.setenv(debug.ENV_VAR, "audio")
    assert not debug.debug_enabled("audio")

    debug.reset_categories()
    assert debug.debug_enabled("audio")
