"""Tests for the 64x32 framebuffer."""

from __future__ import annotations

import pytest

from pychip8.video import DISPLAY_HEIGHT, DISPLAY_SIZE, DISPLAY_WIDTH, Display
from pychip8.video.font import FONTSET, GLYPH_BYTES, GLYPH_COUNT


def lit(display: Display) -> set[tuple[int, int]]:
    return {
        (index % DISPLAY_WIDTH, index // DISPLAY_WIDTH)
        for index, cell in enumerate(display.snapshot())
        if cell
    }


def test_display_dimensions() -> None:
    display = Display()

    assert (display.width, display.height) == (DISPLAY_WIDTH, DISPLAY_HEIGHT)
    assert len(display) == DISPLAY_SIZE == 2048
    assert not any(display.snapshot())


def test_draw_sets_pixels_without_collision() -> None:
    display = Display()

    assert display.draw_sprite(10, 5, [0b10100000]) is False
    assert lit(display) == {(10, 5), (12, 5)}


def test_redraw_erases_and_reports_collision() -> None:
    display = Display()
    display.draw_sprite(0, 0, [0xFF])

    assert display.draw_sprite(0, 0, [0x80]) is True
    assert not display.get_pixel(0, 0)
    assert display.get_pixel(1, 0)


def test_horizontal_wrap_stays_on_same_row() -> None:
    display = Display()
    display.draw_sprite(60, 3, [0xFF])

    assert lit(display) == {(60, 3), (61, 3), (62, 3), (63, 3), (0, 3), (1, 3), (2, 3), (3, 3)}


def test_vertical_wrap_returns_to_top() -> None:
    display = Display()
    display.draw_sprite(0, 30, [0x80, 0x80, 0x80, 0x80])

    assert lit(display) == {(0, 30), (0, 31), (0, 0), (0, 1)}


def test_zero_row_sprite_changes_nothing() -> None:
    display = Display()

    assert display.draw_sprite(5, 5, []) is False
    assert not any(display.snapshot())


def test_get_pixel_bounds() -> None:
    with pytest.raises(IndexError):
        Display().get_pixel(64, 0)


def test_clear_turns_everything_off() -> None:
    display = Display()
    display.draw_sprite(0, 0, [0xFF] * 15)
    assert any(display.snapshot())

    display.clear()
    assert not any(display.snapshot())


def test_font_glyphs_are_five_bytes_each() -> None:
    assert len(FONTSET) == GLYPH_COUNT * GLYPH_BYTES
    assert FONTSET[10 * GLYPH_BYTES : 11 * GLYPH_BYTES] == bytes([0xF0, 0x90, 0xF0, 0x90, 0x90])
