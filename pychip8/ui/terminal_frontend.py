"""Raw-terminal frontend: block-character display and single-key input."""

from __future__ import annotations

import os
import select
import sys
from typing import IO, Iterator, Sequence

from pychip8.io import Keypad, is_quit_key
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import render_frame
from pychip8.video.terminal import SHOW_CURSOR

from .frontend import Frontend

CTRL_C = "ctrl-c"

_ARROWS = {ord("A"): "up", ord("B"): "down", ord("C"): "right", ord("D"): "left"}
_CLEAR_SCREEN = "\x1b[2J"
_WAIT_POLL_SECS = 0.05


def decode_keys(data: bytes) -> Iterator[str]:
    """Turn raw terminal input into key names.

    Arrow keys arrive as ``ESC [ A``..``ESC [ D``. Under load the escape byte
    is sometimes lost, so a bare ``[`` followed by ``A``..``D`` is accepted too.
    """

    index = 0
    length = len(data)
    while index < length:
        byte = data[index]
        if byte == 0x1B and index + 2 < length and data[index + 1] == ord("["):
            name = _ARROWS.get(data[index + 2])
            index += 3
            if name is not None:
                yield name
            continue
        if byte == ord("[") and index + 1 < length and data[index + 1] in _ARROWS:
            yield _ARROWS[data[index + 1]]
            index += 2
            continue
        index += 1
        if byte == 0x03:
            yield CTRL_C
        elif 0x20 < byte < 0x7F:
            yield chr(byte).lower()


def _is_quit(name: str) -> bool:
    return name == CTRL_C or is_quit_key(name)


class TerminalFrontend(Frontend):
    """Draws with full-block characters and reads keys from a raw tty.

    Terminals report no key releases, so every key read counts as a tap that
    stays latched until the next poll.
    """

    def __init__(
        self,
        *,
        stdin: IO | None = None,
        stdout: IO | None = None,
        keypad: Keypad | None = None,
        bell: bool = True,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._keypad = keypad or Keypad()
        self._bell = bell
        self._saved_attrs = None
        self._pending: list[str] = []

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    def open(self) -> None:
        import termios
        import tty

        fd = self._stdin.fileno()
        try:
            self._saved_attrs = termios.tcgetattr(fd)
        except termios.error as exc:
            raise RuntimeError("terminal frontend requires an interactive terminal") from exc
        tty.setraw(fd)
        self._stdout.write(_CLEAR_SCREEN)
        self._stdout.flush()

    def close(self) -> None:
        if self._saved_attrs is not None:
            import termios

            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
        self._stdout.write(SHOW_CURSOR + "\r\n")
        self._stdout.flush()

    def present(self, framebuffer: Sequence[bool]) -> None:
        self._stdout.write(render_frame(framebuffer))
        self._stdout.flush()

    def beep(self) -> None:
        if self._bell:
            self._stdout.write("\a")
            self._stdout.flush()

    def poll_keys(self) -> list[bool] | None:
        for name in self._take_names(0.0):
            if _is_quit(name):
                return None
            if self._keypad.press(name) is not None:
                self._keypad.release(name)
        return self._keypad.poll()

    def wait_for_key(self) -> int | None:
        while True:
            names = self._take_names(_WAIT_POLL_SECS)
            for position, name in enumerate(names):
                if _is_quit(name):
                    return None
                key = self._keypad.lookup(name)
                if key is not None:
                    # Keys typed after this one are seen by the next poll.
                    self._pending = names[position + 1 :]
                    if debug_enabled("input"):
                        debug_log("input", "terminal_key=%s key=%X", name, key)
                    return key

    def _take_names(self, timeout: float) -> list[str]:
        names = self._pending
        self._pending = []
        if names:
            return names + list(decode_keys(self._read_available(0.0)))
        return list(decode_keys(self._read_available(timeout)))

    def _read_available(self, timeout: float) -> bytes:
        fd = self._stdin.fileno()
        readable, _, _ = select.select([fd], [], [], timeout)
        if not readable:
            return b""
        return os.read(fd, 64)
