"""Memory bus for the CHIP-8 interpreter."""

from .memory import MEMORY_SIZE, PROGRAM_START, BusError, Memory, MemoryOutOfRange

__all__ = [
    "MEMORY_SIZE",
    "PROGRAM_START",
    "BusError",
    "Memory",
    "MemoryOutOfRange",
]
