"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import Memory
from pychip8.cpu import Chip8
from pychip8.loader import ProgramImage
from pychip8.utils import TraceRecorder
from pychip8.video import Display


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    seed: Optional[int] = None
    trace_capacity: int = 0
    program: ProgramImage | bytes | None = None


@dataclass
class Machine:
    """Aggregates the core components of one running program."""

    cpu: Chip8
    memory: Memory
    display: Display
    trace: TraceRecorder | None


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a machine and load ``config.program`` if one is given."""

    if config.trace_capacity < 0:
        raise ValueError("trace_capacity must not be negative")

    memory = Memory()
    display = Display()
    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity else None
    cpu = Chip8(
        memory=memory,
        display=display,
        rng=random.Random(config.seed),
        trace=trace,
    )
    if config.program is not None:
        cpu.load(config.program)

    return Machine(cpu=cpu, memory=memory, display=display, trace=trace)
