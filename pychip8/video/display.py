"""Monochrome 64x32 framebuffer."""

from __future__ import annotations

from typing import Sequence

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_SIZE = DISPLAY_WIDTH * DISPLAY_HEIGHT

SPRITE_WIDTH = 8


class Display:
    """Row-major bitmap of on/off cells mutated only by clear and sprite draws."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self._cells: list[bool] = [False] * (width * height)

    def __len__(self) -> int:
        return len(self._cells)

    def clear(self) -> None:
        self._cells = [False] * (self.width * self.height)

    def get_pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return self._cells[y * self.width + x]

    def draw_sprite(self, left: int, top: int, rows: Sequence[int]) -> bool:
        """XOR an 8-pixel-wide sprite onto the display.

        Each axis wraps independently: columns past the right edge continue
        at the left of the same row and rows past the bottom continue at the
        top. Returns ``True`` if any lit pixel was switched off.
        """

        collision = False
        for row_offset, bits in enumerate(rows):
            y = (top + row_offset) % self.height
            base = y * self.width
            for column in range(SPRITE_WIDTH):
                if not bits & (0x80 >> column):
                    continue
                index = base + (left + column) % self.width
                if self._cells[index]:
                    collision = True
                self._cells[index] = not self._cells[index]
        return collision

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._cells)
