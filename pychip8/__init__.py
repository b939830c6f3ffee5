"""CHIP-8 interpreter with pygame and terminal frontends.

The ``cpu`` package holds the engine; everything else adapts it to memory,
video, input, audio and the driver loop used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__version__ = "0.1.0"

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
