"""Text rendering of the framebuffer for raw terminals."""

from __future__ import annotations

from typing import Sequence

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH

BORDER = "##"
LIT = "██"
UNLIT = "  "
HOME = "\x1b[1;1H"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def render_text(
    framebuffer: Sequence[bool],
    *,
    width: int = DISPLAY_WIDTH,
    height: int = DISPLAY_HEIGHT,
) -> list[str]:
    """Return the framebuffer as bordered lines, two characters per pixel."""

    if len(framebuffer) != width * height:
        raise ValueError(f"framebuffer has {len(framebuffer)} cells, expected {width * height}")

    edge = BORDER * (width + 2)
    lines = [edge]
    for y in range(height):
        start = y * width
        body = "".join(LIT if cell else UNLIT for cell in framebuffer[start : start + width])
        lines.append(f"{BORDER}{body}{BORDER}")
    lines.append(edge)
    return lines


def render_frame(framebuffer: Sequence[bool]) -> str:
    """Full-screen update: home the cursor, hide it and draw every line.

    Lines end in ``\\r\\n`` because the terminal is in raw mode.
    """

    return HOME + HIDE_CURSOR + "\r\n".join(render_text(framebuffer)) + "\r\n"
