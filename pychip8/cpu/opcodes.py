"""Instruction decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, Final, Iterator, Tuple

from pychip8.bus import Memory


class Op(Enum):
    """Closed set of instruction kinds."""

    CLEAR_DISPLAY = auto()
    RETURN = auto()
    JUMP = auto()
    CALL = auto()
    SKIP_EQ_CONST = auto()
    SKIP_NE_CONST = auto()
    SKIP_EQ_REG = auto()
    SET_CONST = auto()
    ADD_CONST = auto()
    COPY = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB_REG = auto()
    SHIFT_RIGHT = auto()
    SUB_REVERSED = auto()
    SHIFT_LEFT = auto()
    SKIP_NE_REG = auto()
    SET_INDEX = auto()
    JUMP_PLUS = auto()
    RANDOM = auto()
    DRAW_SPRITE = auto()
    SKIP_KEY_PRESSED = auto()
    SKIP_KEY_NOT_PRESSED = auto()
    GET_DELAY = auto()
    GET_KEY = auto()
    SET_DELAY = auto()
    SET_SOUND = auto()
    ADD_INDEX = auto()
    FONT_SPRITE = auto()
    STORE_BCD = auto()
    REGISTER_DUMP = auto()
    REGISTER_LOAD = auto()


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised when an instruction word matches no known pattern."""

    def __init__(self, word: int, address: int | None = None) -> None:
        location = "" if address is None else f" at {address:#05x}"
        super().__init__(f"illegal opcode {word:#06x}{location}")
        self.word = word
        self.address = address


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word: its kind plus the operand fields."""

    op: Op
    word: int
    x: int = 0
    y: int = 0
    n: int = 0
    nn: int = 0
    nnn: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.word <= 0xFFFF:
            raise ValueError(f"instruction word out of range: {self.word}")

    @property
    def mnemonic(self) -> str:
        return format_instruction(self)


# Sub-opcode tables for the families that need the full pattern checked.
_ARITHMETIC: Final[Dict[int, Op]] = {
    0x0: Op.COPY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB_REG,
    0x6: Op.SHIFT_RIGHT,
    0x7: Op.SUB_REVERSED,
    0xE: Op.SHIFT_LEFT,
}

_KEY_OPS: Final[Dict[int, Op]] = {
    0x9E: Op.SKIP_KEY_PRESSED,
    0xA1: Op.SKIP_KEY_NOT_PRESSED,
}

_MISC_OPS: Final[Dict[int, Op]] = {
    0x07: Op.GET_DELAY,
    0x0A: Op.GET_KEY,
    0x15: Op.SET_DELAY,
    0x18: Op.SET_SOUND,
    0x1E: Op.ADD_INDEX,
    0x29: Op.FONT_SPRITE,
    0x33: Op.STORE_BCD,
    0x55: Op.REGISTER_DUMP,
    0x65: Op.REGISTER_LOAD,
}

# Families fully determined by the high nibble.
_SIMPLE: Final[Dict[int, Op]] = {
    0x1: Op.JUMP,
    0x2: Op.CALL,
    0x3: Op.SKIP_EQ_CONST,
    0x4: Op.SKIP_NE_CONST,
    0x6: Op.SET_CONST,
    0x7: Op.ADD_CONST,
    0xA: Op.SET_INDEX,
    0xB: Op.JUMP_PLUS,
    0xC: Op.RANDOM,
    0xD: Op.DRAW_SPRITE,
}


def decode(word: int) -> Instruction:
    """Decode a 16-bit instruction word.

    Raises :class:`IllegalOpcodeError` for words outside the instruction set.
    """

    if not 0 <= word <= 0xFFFF:
        raise ValueError(f"instruction word out of range: {word}")

    family = word >> 12
    fields = {
        "x": (word >> 8) & 0xF,
        "y": (word >> 4) & 0xF,
        "n": word & 0xF,
        "nn": word & 0xFF,
        "nnn": word & 0xFFF,
    }

    op: Op | None
    if word == 0x00E0:
        op = Op.CLEAR_DISPLAY
    elif word == 0x00EE:
        op = Op.RETURN
    elif family in _SIMPLE:
        op = _SIMPLE[family]
    elif family == 0x5:
        op = Op.SKIP_EQ_REG if fields["n"] == 0x0 else None
    elif family == 0x8:
        op = _ARITHMETIC.get(fields["n"])
    elif family == 0x9:
        op = Op.SKIP_NE_REG if fields["n"] == 0x0 else None
    elif family == 0xE:
        op = _KEY_OPS.get(fields["nn"])
    elif family == 0xF:
        op = _MISC_OPS.get(fields["nn"])
    else:
        op = None

    if op is None:
        raise IllegalOpcodeError(word)
    return Instruction(op, word, **fields)


# ----------------------------------------------------------------------
# Disassembly

def _vx(i: Instruction) -> str:
    return f"V{i.x:X}"


def _vy(i: Instruction) -> str:
    return f"V{i.y:X}"


_FORMATS: Final[Dict[Op, Callable[[Instruction], str]]] = {
    Op.CLEAR_DISPLAY: lambda i: "CLS",
    Op.RETURN: lambda i: "RET",
    Op.JUMP: lambda i: f"JP {i.nnn:#05x}",
    Op.CALL: lambda i: f"CALL {i.nnn:#05x}",
    Op.SKIP_EQ_CONST: lambda i: f"SE {_vx(i)}, {i.nn:#04x}",
    Op.SKIP_NE_CONST: lambda i: f"SNE {_vx(i)}, {i.nn:#04x}",
    Op.SKIP_EQ_REG: lambda i: f"SE {_vx(i)}, {_vy(i)}",
    Op.SET_CONST: lambda i: f"LD {_vx(i)}, {i.nn:#04x}",
    Op.ADD_CONST: lambda i: f"ADD {_vx(i)}, {i.nn:#04x}",
    Op.COPY: lambda i: f"LD {_vx(i)}, {_vy(i)}",
    Op.OR: lambda i: f"OR {_vx(i)}, {_vy(i)}",
    Op.AND: lambda i: f"AND {_vx(i)}, {_vy(i)}",
    Op.XOR: lambda i: f"XOR {_vx(i)}, {_vy(i)}",
    Op.ADD_REG: lambda i: f"ADD {_vx(i)}, {_vy(i)}",
    Op.SUB_REG: lambda i: f"SUB {_vx(i)}, {_vy(i)}",
    Op.SHIFT_RIGHT: lambda i: f"SHR {_vx(i)}, {_vy(i)}",
    Op.SUB_REVERSED: lambda i: f"SUBN {_vx(i)}, {_vy(i)}",
    Op.SHIFT_LEFT: lambda i: f"SHL {_vx(i)}, {_vy(i)}",
    Op.SKIP_NE_REG: lambda i: f"SNE {_vx(i)}, {_vy(i)}",
    Op.SET_INDEX: lambda i: f"LD I, {i.nnn:#05x}",
    Op.JUMP_PLUS: lambda i: f"JP V0, {i.nnn:#05x}",
    Op.RANDOM: lambda i: f"RND {_vx(i)}, {i.nn:#04x}",
    Op.DRAW_SPRITE: lambda i: f"DRW {_vx(i)}, {_vy(i)}, {i.n}",
    Op.SKIP_KEY_PRESSED: lambda i: f"SKP {_vx(i)}",
    Op.SKIP_KEY_NOT_PRESSED: lambda i: f"SKNP {_vx(i)}",
    Op.GET_DELAY: lambda i: f"LD {_vx(i)}, DT",
    Op.GET_KEY: lambda i: f"LD {_vx(i)}, K",
    Op.SET_DELAY: lambda i: f"LD DT, {_vx(i)}",
    Op.SET_SOUND: lambda i: f"LD ST, {_vx(i)}",
    Op.ADD_INDEX: lambda i: f"ADD I, {_vx(i)}",
    Op.FONT_SPRITE: lambda i: f"LD F, {_vx(i)}",
    Op.STORE_BCD: lambda i: f"LD B, {_vx(i)}",
    Op.REGISTER_DUMP: lambda i: f"LD [I], {_vx(i)}",
    Op.REGISTER_LOAD: lambda i: f"LD {_vx(i)}, [I]",
}


def format_instruction(instruction: Instruction) -> str:
    """Return assembler-style text such as ``ADD V1, V2``."""

    return _FORMATS[instruction.op](instruction)


def disassemble(memory: Memory, start: int, count: int) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, word, text)`` for ``count`` words starting at ``start``.

    Words that do not decode are rendered as ``DW 0xNNNN``.
    """

    address = start
    for _ in range(count):
        word = memory.load16(address)
        try:
            text = format_instruction(decode(word))
        except IllegalOpcodeError:
            text = f"DW {word:#06x}"
        yield address, word, text
        address += 2


__all__ = [
    "Op",
    "Instruction",
    "CPUError",
    "IllegalOpcodeError",
    "decode",
    "format_instruction",
    "disassemble",
]
