"""Convert the framebuffer into RGB pixel data for a pygame surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB24 image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Scale a 64x32 boolean framebuffer into an RGB image."""

    def __init__(
        self,
        palette: Sequence[RGBColor] = MONOCHROME,
        *,
        width: int = DISPLAY_WIDTH,
        height: int = DISPLAY_HEIGHT,
    ) -> None:
        self._background, self._foreground = validate_palette(palette)
        self._width = width
        self._height = height

    def render(self, framebuffer: Sequence[bool], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(framebuffer) != self._width * self._height:
            raise ValueError(
                f"framebuffer has {len(framebuffer)} cells, expected {self._width * self._height}"
            )

        out_width = self._width * scale
        out_height = self._height * scale
        background = bytes(self._background)
        foreground = bytes(self._foreground)
        pixels = bytearray()

        for y in range(self._height):
            start = y * self._width
            line = bytearray()
            for cell in framebuffer[start : start + self._width]:
                line += (foreground if cell else background) * scale
            pixels += bytes(line) * scale

        return RenderResult(out_width, out_height, pixels)
