"""CHIP-8 interpreter engine."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Final, Sequence

from pychip8.bus import PROGRAM_START, Memory
from pychip8.loader.program import ProgramImage, validate_image
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FONT_ADDRESS, FONTSET, GLYPH_BYTES, Display

from .opcodes import CPUError, IllegalOpcodeError, Instruction, Op, decode

NUM_REGISTERS = 16
STACK_SIZE = 16
NUM_KEYS = 16
FLAG_REGISTER = 0xF


class StackOverflowError(CPUError):
    """Raised when a call would nest deeper than the stack allows."""

    def __init__(self, address: int) -> None:
        super().__init__(f"stack overflow: call at {address:#05x} exceeds {STACK_SIZE} levels")
        self.address = address


class StackUnderflowError(CPUError):
    """Raised when a return is executed with an empty stack."""

    def __init__(self, address: int) -> None:
        super().__init__(f"stack underflow: return at {address:#05x} with empty stack")
        self.address = address


class KeyWaitError(CPUError):
    """Raised when a key is delivered while no key-wait is pending."""


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    pc: int = PROGRAM_START
    sp: int = 0
    index: int = 0x000
    delay_timer: int = 0
    sound_timer: int = 0
    registers: list[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)

    def clone(self) -> "CPUState":
        return CPUState(
            self.pc,
            self.sp,
            self.index,
            self.delay_timer,
            self.sound_timer,
            list(self.registers),
        )


@dataclass
class Chip8:
    """Machine state plus the fetch/decode/execute cycle.

    The engine performs no I/O and no timing. A driver calls :meth:`step`
    at its chosen clock rate and inspects ``draw_flag``, ``beep_flag`` and
    ``waiting_for_key`` between steps.
    """

    memory: Memory = field(default_factory=Memory)
    display: Display = field(default_factory=Display)
    rng: random.Random = field(default_factory=random.Random)
    trace: TraceRecorder | None = None

    state: CPUState = field(default_factory=CPUState)
    stack: list[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    keys: list[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    draw_flag: bool = False
    beep_flag: bool = False
    waiting_for_key: bool = False
    key_target: int = 0
    cycle_count: int = 0

    def __post_init__(self) -> None:
        self._install_font()

    def reset(self) -> None:
        """Return to the power-on state, keeping any loaded program bytes.

        Any attached trace is emptied.
        """

        self.state = CPUState()
        self.stack = [0] * STACK_SIZE
        self.keys = [False] * NUM_KEYS
        self.display.clear()
        self.draw_flag = False
        self.beep_flag = False
        self.waiting_for_key = False
        self.key_target = 0
        self.cycle_count = 0
        self._install_font()
        if self.trace is not None:
            self.trace.clear()

    def load(self, program: bytes | ProgramImage) -> None:
        """Copy a program image into memory at ``PROGRAM_START``.

        Oversize images raise ``ImageTooLargeError`` before memory is touched.
        """

        data = program.data if isinstance(program, ProgramImage) else program
        payload = validate_image(data)
        self.memory.write_block(PROGRAM_START, payload)
        if debug_enabled("cpu"):
            debug_log("cpu", "loaded %d bytes at %03x", len(payload), PROGRAM_START)

    def step(self) -> bool:
        """Run one fetch/decode/execute/timer cycle.

        Returns ``False`` without doing anything while a key-wait is pending.
        """

        self.draw_flag = False
        self.beep_flag = False
        if self.waiting_for_key:
            return False

        state = self.state
        pc_before = state.pc
        word = self.memory.load16(pc_before)
        state.pc = pc_before + 2

        try:
            instruction = decode(word)
        except IllegalOpcodeError as exc:
            raise IllegalOpcodeError(word, pc_before) from exc

        if self.trace is not None:
            before = state.clone()
            before.pc = pc_before
            self.trace.record_step(before, word, mnemonic=instruction.mnemonic)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, word, instruction.mnemonic)

        handler = getattr(self, _HANDLERS[instruction.op])
        handler(instruction)

        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1
            if state.sound_timer == 0:
                self.beep_flag = True

        self.cycle_count += 1
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%03x I=%03x V=%s",
                state.pc,
                state.index,
                " ".join(f"{value:02x}" for value in state.registers),
            )
        return True

    # ------------------------------------------------------------------
    # Driver interface

    def deliver_key(self, key: int) -> None:
        """Complete a pending key-wait by writing ``key`` to the target register."""

        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"key out of range: {key}")
        if not self.waiting_for_key:
            raise KeyWaitError("no key-wait is pending")
        self.state.registers[self.key_target] = key
        self.waiting_for_key = False

    def merge_key_state(self, pressed: Sequence[bool]) -> None:
        """OR a 16-entry pressed set into the latched key state."""

        if len(pressed) != NUM_KEYS:
            raise ValueError(f"expected {NUM_KEYS} key states, got {len(pressed)}")
        for key, down in enumerate(pressed):
            if down:
                self.keys[key] = True

    def framebuffer(self) -> tuple[bool, ...]:
        return self.display.snapshot()

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_clear_display(self, _: Instruction) -> None:
        self.display.clear()
        self.draw_flag = True

    def op_return(self, _: Instruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(state.pc - 2)
        state.sp -= 1
        state.pc = self.stack[state.sp]

    def op_jump(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        state = self.state
        if state.sp >= STACK_SIZE:
            raise StackOverflowError(state.pc - 2)
        self.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = instruction.nnn

    def op_skip_eq_const(self, instruction: Instruction) -> None:
        self._skip_if(self.state.registers[instruction.x] == instruction.nn)

    def op_skip_ne_const(self, instruction: Instruction) -> None:
        self._skip_if(self.state.registers[instruction.x] != instruction.nn)

    def op_skip_eq_reg(self, instruction: Instruction) -> None:
        regs = self.state.registers
        self._skip_if(regs[instruction.x] == regs[instruction.y])

    def op_set_const(self, instruction: Instruction) -> None:
        self.state.registers[instruction.x] = instruction.nn

    def op_add_const(self, instruction: Instruction) -> None:
        regs = self.state.registers
        regs[instruction.x] = (regs[instruction.x] + instruction.nn) & 0xFF

    def op_copy(self, instruction: Instruction) -> None:
        regs = self.state.registers
        regs[instruction.x] = regs[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        regs = self.state.registers
        regs[instruction.x] |= regs[instruction.y]

    def op_and(self, instruction: Instruction) -> None:
        regs = self.state.registers
        regs[instruction.x] &= regs[instruction.y]

    def op_xor(self, instruction: Instruction) -> None:
        regs = self.state.registers
        regs[instruction.x] ^= regs[instruction.y]

    def op_add_reg(self, instruction: Instruction) -> None:
        regs = self.state.registers
        total = regs[instruction.x] + regs[instruction.y]
        regs[instruction.x] = total & 0xFF
        regs[FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_sub_reg(self, instruction: Instruction) -> None:
        regs = self.state.registers
        minuend, subtrahend = regs[instruction.x], regs[instruction.y]
        regs[instruction.x] = (minuend - subtrahend) & 0xFF
        regs[FLAG_REGISTER] = 0 if subtrahend > minuend else 1

    def op_shift_right(self, instruction: Instruction) -> None:
        regs = self.state.registers
        source = regs[instruction.y]
        shifted = source >> 1
        regs[instruction.x] = shifted
        regs[instruction.y] = shifted
        regs[FLAG_REGISTER] = source & 0x01

    def op_sub_reversed(self, instruction: Instruction) -> None:
        regs = self.state.registers
        minuend, subtrahend = regs[instruction.y], regs[instruction.x]
        regs[instruction.x] = (minuend - subtrahend) & 0xFF
        regs[FLAG_REGISTER] = 0 if subtrahend > minuend else 1

    def op_shift_left(self, instruction: Instruction) -> None:
        regs = self.state.registers
        source = regs[instruction.y]
        shifted = (source << 1) & 0xFF
        regs[instruction.x] = shifted
        regs[instruction.y] = shifted
        # High bit kept as 0x80 or 0x00, not normalised to 1/0.
        regs[FLAG_REGISTER] = source & 0x80

    def op_skip_ne_reg(self, instruction: Instruction) -> None:
        regs = self.state.registers
        self._skip_if(regs[instruction.x] != regs[instruction.y])

    def op_set_index(self, instruction: Instruction) -> None:
        self.state.index = instruction.nnn

    def op_jump_plus(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn + self.state.registers[0x0]

    def op_random(self, instruction: Instruction) -> None:
        self.state.registers[instruction.x] = self.rng.randrange(0x100) & instruction.nn

    def op_draw_sprite(self, instruction: Instruction) -> None:
        regs = self.state.registers
        rows = self.memory.read_block(self.state.index, instruction.n)
        collision = self.display.draw_sprite(regs[instruction.x], regs[instruction.y], rows)
        regs[FLAG_REGISTER] = 1 if collision else 0
        self.draw_flag = True

    def op_skip_key_pressed(self, instruction: Instruction) -> None:
        key = self.state.registers[instruction.x] & 0x0F
        self._skip_if(self.keys[key])
        self.keys[key] = False

    def op_skip_key_not_pressed(self, instruction: Instruction) -> None:
        key = self.state.registers[instruction.x] & 0x0F
        self._skip_if(not self.keys[key])
        self.keys[key] = False

    def op_get_delay(self, instruction: Instruction) -> None:
        self.state.registers[instruction.x] = self.state.delay_timer

    def op_get_key(self, instruction: Instruction) -> None:
        self.waiting_for_key = True
        self.key_target = instruction.x
        if debug_enabled("input"):
            debug_log("input", "key_wait target=V%X", instruction.x)

    def op_set_delay(self, instruction: Instruction) -> None:
        self.state.delay_timer = self.state.registers[instruction.x]

    def op_set_sound(self, instruction: Instruction) -> None:
        self.state.sound_timer = self.state.registers[instruction.x]

    def op_add_index(self, instruction: Instruction) -> None:
        state = self.state
        state.index = (state.index + state.registers[instruction.x]) & 0xFFFF

    def op_font_sprite(self, instruction: Instruction) -> None:
        self.state.index = FONT_ADDRESS + GLYPH_BYTES * self.state.registers[instruction.x]

    def op_store_bcd(self, instruction: Instruction) -> None:
        value = self.state.registers[instruction.x]
        self.memory.write_block(self.state.index, (value // 100, (value // 10) % 10, value % 10))

    def op_register_dump(self, instruction: Instruction) -> None:
        state = self.state
        count = instruction.x + 1
        self.memory.write_block(state.index, state.registers[:count])
        state.index = (state.index + count) & 0xFFFF

    def op_register_load(self, instruction: Instruction) -> None:
        state = self.state
        count = instruction.x + 1
        state.registers[:count] = self.memory.read_block(state.index, count)
        state.index = (state.index + count) & 0xFFFF

    # ------------------------------------------------------------------
    # Helpers

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.pc += 2

    def _install_font(self) -> None:
        self.memory.write_block(FONT_ADDRESS, FONTSET)


_HANDLERS: Final[Dict[Op, str]] = {op: f"op_{op.name.lower()}" for op in Op}

_missing = sorted(name for name in _HANDLERS.values() if not callable(getattr(Chip8, name, None)))
if _missing:
    raise ImportError(f"Chip8 is missing instruction handlers: {', '.join(_missing)}")
del _missing


__all__ = [
    "Chip8",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "KeyWaitError",
    "StackOverflowError",
    "StackUnderflowError",
    "NUM_REGISTERS",
    "NUM_KEYS",
    "STACK_SIZE",
    "FLAG_REGISTER",
]
