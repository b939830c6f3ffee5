"""Framebuffer, font and rendering helpers."""

from __future__ import annotations

from .display import DISPLAY_HEIGHT, DISPLAY_SIZE, DISPLAY_WIDTH, Display
from .font import FONT_ADDRESS, FONTSET, GLYPH_BYTES
from .palette import MONOCHROME, PALETTES, PHOSPHOR, validate_palette
from .renderer import RenderResult, Renderer
from .terminal import render_frame, render_text

__all__ = [
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "DISPLAY_SIZE",
    "FONTSET",
    "FONT_ADDRESS",
    "GLYPH_BYTES",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PHOSPHOR",
    "PALETTES",
    "validate_palette",
    "render_frame",
    "render_text",
]
