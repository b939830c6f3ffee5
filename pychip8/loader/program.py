"""Raw program image loading.

Program images have no header: the file contents are copied verbatim into
memory starting at ``PROGRAM_START``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START

PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START


class ImageTooLargeError(ValueError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""

    def __init__(self, size: int, capacity: int = PROGRAM_CAPACITY) -> None:
        super().__init__(f"program image is {size} bytes; at most {capacity} bytes fit")
        self.size = size
        self.capacity = capacity


@dataclass(frozen=True)
class ProgramImage:
    """A program's bytes plus the name it was loaded under."""

    data: bytes
    name: str = ""

    def __len__(self) -> int:
        return len(self.data)

    @property
    def end_address(self) -> int:
        """Address one past the last program byte once loaded."""

        return PROGRAM_START + len(self.data)


def validate_image(data: bytes) -> bytes:
    payload = bytes(data)
    if len(payload) > PROGRAM_CAPACITY:
        raise ImageTooLargeError(len(payload))
    return payload


def load_program(stream: BinaryIO, name: str = "") -> ProgramImage:
    """Read a program image from ``stream``."""

    # One byte past capacity is enough to know the image is oversize.
    payload = stream.read(PROGRAM_CAPACITY + 1)
    if len(payload) > PROGRAM_CAPACITY:
        size = len(payload) + len(stream.read())
        raise ImageTooLargeError(size)
    return ProgramImage(validate_image(payload), name)


def load_program_from_path(path: Path) -> ProgramImage:
    """Load a program image from the filesystem."""

    with path.open("rb") as handle:
        return load_program(handle, path.stem)
