"""Capability interface implemented by display/input/audio backends."""

from __future__ import annotations

from typing import Sequence


class Frontend:
    """What the driver loop needs from a backend.

    ``poll_keys`` and ``wait_for_key`` return ``None`` when the user asks to
    quit.
    """

    def open(self) -> None:
        """Acquire the window, terminal or audio device."""

    def close(self) -> None:
        """Release everything acquired by :meth:`open`."""

    def present(self, framebuffer: Sequence[bool]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def beep(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def poll_keys(self) -> list[bool] | None:  # pragma: no cover - interface
        raise NotImplementedError

    def wait_for_key(self) -> int | None:  # pragma: no cover - interface
        raise NotImplementedError
