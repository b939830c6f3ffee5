"""Byte-addressable memory for the CHIP-8 interpreter.

The machine has a flat 4 KiB address space. The first 0x200 bytes are
reserved for the interpreter (the built-in font lives at the very start)
and programs are copied in from ``PROGRAM_START`` onwards. Every access is
bounds-checked so that a runaway program surfaces as ``MemoryOutOfRange``
instead of silently reading or growing the buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200


class BusError(Exception):
    """Raised when memory is misconfigured or used incorrectly."""


class MemoryOutOfRange(BusError):
    """Raised when an access falls outside the address space."""

    def __init__(self, address: int, size: int = MEMORY_SIZE) -> None:
        super().__init__(f"address {address:#05x} outside memory 0x000-{size - 1:#05x}")
        self.address = address
        self.size = size


@dataclass
class Memory:
    """Fixed-size byte array with checked 8/16-bit accessors."""

    length: int = MEMORY_SIZE

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise BusError("memory must have a positive length")
        self._data = bytearray(self.length)

    def __len__(self) -> int:
        return self.length

    def _check(self, address: int, count: int = 1) -> None:
        if address < 0 or address + count > self.length:
            bad = address if address < 0 or address >= self.length else self.length
            raise MemoryOutOfRange(bad, self.length)

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word (high byte at ``address``)."""

        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def store16(self, address: int, value: int) -> None:
        self._check(address, 2)
        self._data[address] = (value >> 8) & 0xFF
        self._data[address + 1] = value & 0xFF

    def read_block(self, address: int, count: int) -> bytes:
        self._check(address, count)
        return bytes(self._data[address : address + count])

    def write_block(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in data)
        self._check(address, len(payload))
        self._data[address : address + len(payload)] = payload
