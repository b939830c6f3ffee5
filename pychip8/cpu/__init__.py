"""CPU package: opcode decoder and interpreter engine."""

from .core import (
    Chip8,
    CPUError,
    CPUState,
    IllegalOpcodeError,
    KeyWaitError,
    StackOverflowError,
    StackUnderflowError,
)
from . import opcodes
from .opcodes import Instruction, Op, decode, disassemble, format_instruction

__all__ = [
    "Chip8",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "KeyWaitError",
    "StackOverflowError",
    "StackUnderflowError",
    "Instruction",
    "Op",
    "decode",
    "disassemble",
    "format_instruction",
    "opcodes",
]
