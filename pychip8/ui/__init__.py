"""Frontends and the driver application loop.

The pygame and terminal frontends are imported on demand so that the
engine can be used without either backend available.
"""

from .app import FRONTENDS, AppConfig, Chip8App
from .frontend import Frontend

__all__ = [
    "AppConfig",
    "Chip8App",
    "FRONTENDS",
    "Frontend",
]
