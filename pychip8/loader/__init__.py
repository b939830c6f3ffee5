"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import (
    PROGRAM_CAPACITY,
    ImageTooLargeError,
    ProgramImage,
    load_program,
    load_program_from_path,
    validate_image,
)

__all__ = [
    "PROGRAM_CAPACITY",
    "ImageTooLargeError",
    "ProgramImage",
    "load_program",
    "load_program_from_path",
    "validate_image",
]
