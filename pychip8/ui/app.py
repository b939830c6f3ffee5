"""Driver loop: paces the engine and connects it to a frontend."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from pychip8.bus import BusError
from pychip8.cpu import CPUError
from pychip8.loader import ImageTooLargeError, load_program_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import PALETTES

from .frontend import Frontend

FRONTENDS = ("pygame", "terminal")

_FRAME_RATE = 60
_TRACE_CAPACITY = 512


@dataclass
class AppConfig:
    """Configuration for the emulator frontend and driver loop."""

    program_path: Optional[Path] = None
    frontend: str = "pygame"
    scale: int = 10
    fullscreen: bool = False
    palette: str = "phosphor"
    clock_hz: int = 600
    seed: Optional[int] = None
    max_cycles: Optional[int] = None


class Chip8App:
    """Runs one program: steps the engine, forwards keys, redraws and beeps."""

    def __init__(
        self,
        config: AppConfig,
        frontend: Frontend | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if config.clock_hz <= 0:
            raise ValueError("clock_hz must be positive")
        self._config = config
        self._frontend = frontend
        self._sleep = sleep
        self._clock = clock
        self._running = False
        self._cycles = 0
        self._machine: Machine | None = None
        self._perf_enabled = debug_enabled("perf")
        self._frame_counter = 0

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def cycles(self) -> int:
        return self._cycles

    def run(self) -> None:
        if not self._config.program_path:
            raise RuntimeError("Program image is required; pass a program path")

        machine = self._create_machine(self._config.program_path)
        self._machine = machine
        frontend = self._frontend or self._build_frontend()
        self._frontend = frontend

        frontend.open()
        try:
            self._main_loop(machine, frontend)
        finally:
            frontend.close()

    def _create_machine(self, program_path: Path) -> Machine:
        try:
            program = load_program_from_path(program_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Program file not found: {program_path}") from exc
        except ImageTooLargeError as exc:
            raise RuntimeError(f"Failed to load program {program_path}: {exc}") from exc

        trace_capacity = _TRACE_CAPACITY if debug_enabled("trace") else 0
        machine = create_machine(
            MachineConfig(seed=self._config.seed, trace_capacity=trace_capacity, program=program)
        )
        if debug_enabled("app"):
            debug_log("app", "loaded program=%s bytes=%d", program.name, len(program))
        return machine

    def _build_frontend(self) -> Frontend:
        kind = self._config.frontend
        if kind == "pygame":
            from .pygame_frontend import PygameFrontend

            palette = PALETTES.get(self._config.palette)
            if palette is None:
                raise RuntimeError(f"Unknown palette '{self._config.palette}'")
            return PygameFrontend(
                scale=self._config.scale,
                palette=palette,
                fullscreen=self._config.fullscreen,
            )
        if kind == "terminal":
            from .terminal_frontend import TerminalFrontend

            return TerminalFrontend()
        raise RuntimeError(f"Unknown frontend '{kind}'; choose one of {', '.join(FRONTENDS)}")

    def _main_loop(self, machine: Machine, frontend: Frontend) -> None:
        cpu = machine.cpu
        cycles_per_frame = max(1, self._config.clock_hz // _FRAME_RATE)
        frame_secs = 1.0 / _FRAME_RATE

        frontend.present(cpu.framebuffer())
        self._running = True
        deadline = self._clock()

        while self._running:
            keys = frontend.poll_keys()
            if keys is None:
                break
            cpu.merge_key_state(keys)

            frame_start = self._clock()
            frame_start_cycles = self._cycles
            if self._run_frame(machine, frontend, cycles_per_frame):
                frontend.present(cpu.framebuffer())
            self._frame_counter += 1

            if self._perf_enabled:
                elapsed = self._clock() - frame_start
                debug_log(
                    "perf",
                    "frame=%d cycles=%d frame_ms=%.3f",
                    self._frame_counter,
                    self._cycles - frame_start_cycles,
                    elapsed * 1000.0,
                )

            deadline += frame_secs
            delay = deadline - self._clock()
            if delay > 0:
                self._sleep(delay)
            else:
                deadline = self._clock()

    def _run_frame(self, machine: Machine, frontend: Frontend, budget: int) -> bool:
        """Step up to ``budget`` cycles; return whether the screen needs redrawing."""

        cpu = machine.cpu
        limit = self._config.max_cycles
        dirty = False
        try:
            for _ in range(budget):
                if cpu.waiting_for_key:
                    if dirty:
                        frontend.present(cpu.framebuffer())
                        dirty = False
                    key = frontend.wait_for_key()
                    if key is None:
                        self._running = False
                        break
                    cpu.deliver_key(key)

                cpu.step()
                self._cycles += 1
                if cpu.draw_flag:
                    dirty = True
                if cpu.beep_flag:
                    frontend.beep()

                if limit is not None and self._cycles >= limit:
                    self._running = False
                    break
        except (CPUError, BusError) as exc:
            self._running = False
            self._report_fault(machine, exc)
            raise RuntimeError(f"Emulation stopped: {exc}") from exc
        return dirty

    def _report_fault(self, machine: Machine, exc: Exception) -> None:
        state = machine.cpu.state
        debug_log(
            "app",
            "fault=%s pc=%03x I=%03x sp=%d cycles=%d",
            exc,
            state.pc,
            state.index,
            state.sp,
            self._cycles,
        )
        if machine.trace is not None:
            machine.trace.dump("trace", limit=32)
