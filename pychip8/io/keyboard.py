"""Host keyboard to CHIP-8 hex keypad mapping."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Mapping

from pychip8.utils import debug_enabled, debug_log

NUM_KEYS = 16

KEYPAD_MAP: Mapping[str, int] = {
    "up": 0x2,
    "down": 0x8,
    "left": 0x4,
    "right": 0x6,
    "q": 0x0,
    "w": 0x1,
    "e": 0x3,
    "r": 0x5,
    "t": 0x7,
    "y": 0x9,
    "a": 0xA,
    "s": 0xB,
    "d": 0xC,
    "f": 0xD,
    "g": 0xE,
    "h": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "up arrow": "up",
    "down arrow": "down",
    "left arrow": "left",
    "right arrow": "right",
}

QUIT_KEYS = frozenset({"x"})


def canonical_name(name: str) -> str:
    lowered = name.lower()
    return ALIAS_TABLE.get(lowered, lowered)


def is_quit_key(name: str) -> bool:
    return canonical_name(name) in QUIT_KEYS


@dataclass
class Keypad:
    """Tracks host key events for the 16-key hex keypad.

    Presses are latched until the next :meth:`poll`, so a key tapped and
    released between two polls is still reported once. Keys that remain held
    are reported on every poll.
    """

    _latched: list[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    _active: Dict[int, int] = field(default_factory=dict)
    _presses: Deque[int] = field(default_factory=deque)

    def press(self, key_name: str) -> int | None:
        key = self.lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return None
        self._active[key] = self._active.get(key, 0) + 1
        self._latched[key] = True
        self._presses.append(key)
        if debug_enabled("input"):
            debug_log("input", "keypad_press key=%X", key)
        return key

    def release(self, key_name: str) -> int | None:
        key = self.lookup(key_name)
        if key is None:
            return None
        count = self._active.get(key, 0)
        if count <= 1:
            self._active.pop(key, None)
        else:
            self._active[key] = count - 1
        if debug_enabled("input"):
            debug_log("input", "keypad_release key=%X count=%d", key, self._active.get(key, 0))
        return key

    def poll(self) -> list[bool]:
        """Return keys pressed since the last poll or still held, then clear the latch.

        Queued presses are consumed too, so :meth:`next_press` only sees keys
        pressed after this call.
        """

        result = [self._latched[key] or key in self._active for key in range(NUM_KEYS)]
        self._latched = [False] * NUM_KEYS
        self._presses.clear()
        return result

    def next_press(self) -> int | None:
        """Pop the oldest press made since the last poll, if any.

        The returned press is consumed: unless the key is still held or was
        pressed again, the next :meth:`poll` does not report it.
        """

        if not self._presses:
            return None
        key = self._presses.popleft()
        if key not in self._presses:
            self._latched[key] = False
        return key

    def lookup(self, key_name: str) -> int | None:
        return KEYPAD_MAP.get(canonical_name(key_name))

