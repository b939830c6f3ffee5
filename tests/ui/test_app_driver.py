"""Tests for the driver loop using an in-memory frontend."""

from __future__ import annotations

from pathlib import Path

import pytest

from pychip8.ui import AppConfig, Chip8App, Frontend


class FakeFrontend(Frontend):
    def __init__(self, *, keys=None, waits=(), polls=None) -> None:
        self.opened = False
        self.closed = False
        self.frames: list[tuple[bool, ...]] = []
        self.beeps = 0
        self.wait_calls = 0
        self._keys = list(keys) if keys is not None else [False] * 16
        self._waits = list(waits)
        self._polls = polls

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def present(self, framebuffer) -> None:
        self.frames.append(tuple(framebuffer))

    def beep(self) -> None:
        self.beeps += 1

    def poll_keys(self):
        if self._polls is not None:
            if self._polls == 0:
                return None
            self._polls -= 1
        return list(self._keys)

    def wait_for_key(self):
        self.wait_calls += 1
        return self._waits.pop(0) if self._waits else None


def write_program(tmp_path: Path, *words: int) -> Path:
    path = tmp_path / "test.ch8"
    path.write_bytes(b"".join(word.to_bytes(2, "big") for word in words))
    return path


def make_app(path: Path, frontend: Frontend, **overrides) -> Chip8App:
    config = AppConfig(program_path=path, **overrides)
    return Chip8App(config, frontend, sleep=lambda _: None)


def test_runs_until_cycle_limit(tmp_path: Path) -> None:
    frontend = FakeFrontend()
    app = make_app(write_program(tmp_path, 0x1200), frontend, max_cycles=25)

    app.run()

    assert app.cycles == 25
    assert frontend.opened and frontend.closed
    # Only the initial frame: nothing was drawn.
    assert len(frontend.frames) == 1


def test_draw_triggers_present(tmp_path: Path) -> None:
    frontend = FakeFrontend()
    app = make_app(write_program(tmp_path, 0xA000, 0xD005, 0x1204), frontend, max_cycles=30)

    app.run()

    assert len(frontend.frames) == 2
    assert frontend.frames[-1][0:4] == (True, True, True, True)


def test_sound_timer_expiry_beeps(tmp_path: Path) -> None:
    frontend = FakeFrontend()
    app = make_app(write_program(tmp_path, 0x6001, 0xF018, 0x1204), frontend, max_cycles=10)

    app.run()

    assert frontend.beeps == 1


def test_key_wait_blocks_on_frontend(tmp_path: Path) -> None:
    frontend = FakeFrontend(waits=[7])
    app = make_app(write_program(tmp_path, 0xF50A, 0x1202), frontend, max_cycles=5)

    app.run()

    assert frontend.wait_calls == 1
    assert app.machine.cpu.state.registers[5] == 7
    assert app.cycles == 5


def test_quit_during_key_wait_stops_cleanly(tmp_path: Path) -> None:
    frontend = FakeFrontend()
    app = make_app(write_program(tmp_path, 0xF00A), frontend)

    app.run()

    assert app.cycles == 1
    assert frontend.closed


def test_quit_from_poll_runs_nothing(tmp_path: Path) -> None:
    frontend = FakeFrontend(polls=0)
    app = make_app(write_program(tmp_path, 0x1200), frontend)

    app.run()

    assert app.cycles == 0
    assert frontend.closed


def test_polled_keys_reach_engine(tmp_path: Path) -> None:
    keys = [False] * 16
    keys[0] = True
    frontend = FakeFrontend(keys=keys)
    app = make_app(write_program(tmp_path, 0x6000, 0xE09E, 0x6101, 0x1206), frontend, max_cycles=10)

    app.run()

    assert app.machine.cpu.state.registers[1] == 0


def test_frames_run_clock_divided_by_frame_rate(tmp_path: Path) -> None:
    frontend = FakeFrontend(polls=3)
    app = make_app(write_program(tmp_path, 0x1200), frontend, clock_hz=120)

    app.run()

    assert app.cycles == 6


def test_engine_fault_becomes_runtime_error(tmp_path: Path) -> None:
    frontend = FakeFrontend()
    app = make_app(write_program(tmp_path, 0x6001, 0x5011), frontend)

    with pytest.raises(RuntimeError, match="Emulation stopped: illegal opcode 0x5011 at 0x202"):
        app.run()

    assert frontend.closed


def test_stack_underflow_becomes_runtime_error(tmp_path: Path) -> None:
    app = make_app(write_program(tmp_path, 0x00EE), FakeFrontend())

    with pytest.raises(RuntimeError, match="stack underflow"):
        app.run()


def test_missing_program(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match="not found"):
        make_app(tmp_path / "nope.ch8", FakeFrontend()).run()

    with pytest.raises(RuntimeError, match="required"):
        Chip8App(AppConfig(), FakeFrontend()).run()


def test_oversize_program(tmp_path: Path) -> None:
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(0x1000))

    with pytest.raises(RuntimeError, match="Failed to load program"):
        make_app(path, FakeFrontend()).run()


def test_unknown_frontend(tmp_path: Path) -> None:
    app = Chip8App(AppConfig(program_path=write_program(tmp_path, 0x1200), frontend="curses"))

    with pytest.raises(RuntimeError, match="Unknown frontend"):
        app.run()


def test_clock_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(clock_hz=0))


def test_unknown_palette(tmp_path: Path) -> None:
    config = AppConfig(program_path=write_program(tmp_path, 0x1200), palette="sepia")

    with pytest.raises(RuntimeError, match="Unknown palette"):
        Chip8App(config).run()
