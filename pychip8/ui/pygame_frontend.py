"""Windowed frontend built on pygame."""

from __future__ import annotations

from typing import Sequence

from pychip8.audio import SquareWaveBeeper
from pychip8.io import Keypad, is_quit_key
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, PHOSPHOR, Renderer
from pychip8.video.palette import RGBColor

from .frontend import Frontend

_WAIT_FRAME_RATE = 60


class PygameFrontend(Frontend):
    """Scaled window, keyboard events and a square-wave beeper."""

    def __init__(
        self,
        *,
        scale: int = 10,
        palette: Sequence[RGBColor] = PHOSPHOR,
        fullscreen: bool = False,
        keypad: Keypad | None = None,
        caption: str = "CHIP-8",
    ) -> None:
        if scale <= 0:
            raise ValueError("scale must be positive")
        self._scale = scale
        self._fullscreen = fullscreen
        self._caption = caption
        self._renderer = Renderer(palette)
        self._keypad = keypad or Keypad()
        self._pygame = None
        self._screen = None
        self._clock = None
        self._beeper: SquareWaveBeeper | None = None

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    def open(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the window frontend") from exc

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(self._caption)
        self._pygame = pygame

        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)

        mixer_state = pygame.mixer.get_init()
        if mixer_state is not None:
            try:
                self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
            except RuntimeError as exc:
                self._beeper = None
                if debug_enabled("audio"):
                    debug_log("audio", "beeper_init_failed=%s", exc)
        elif debug_enabled("audio"):
            debug_log("audio", "mixer_unavailable")

        size = (DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)
        flags = pygame.FULLSCREEN if self._fullscreen else 0
        self._screen = pygame.display.set_mode(size, flags)
        self._clock = pygame.time.Clock()

    def close(self) -> None:
        if self._beeper is not None:
            self._beeper.shutdown()
            self._beeper = None
        if self._pygame is not None:
            self._pygame.quit()
            self._pygame = None
        self._screen = None

    def present(self, framebuffer: Sequence[bool]) -> None:
        if self._screen is None or self._pygame is None:
            raise RuntimeError("frontend is not open")
        frame = self._renderer.render(framebuffer, scale=self._scale)
        self._screen.blit(frame.to_surface(), (0, 0))
        self._pygame.display.flip()

    def beep(self) -> None:
        if debug_enabled("audio"):
            debug_log("audio", "beep")
        if self._beeper is not None:
            self._beeper.beep()

    def poll_keys(self) -> list[bool] | None:
        if not self._pump_events():
            return None
        return self._keypad.poll()

    def wait_for_key(self) -> int | None:
        self._keypad.poll()
        while True:
            if not self._pump_events():
                return None
            key = self._keypad.next_press()
            if key is not None:
                return key
            if self._clock is not None:
                self._clock.tick(_WAIT_FRAME_RATE)

    def _pump_events(self) -> bool:
        pygame = self._pygame
        if pygame is None:
            raise RuntimeError("frontend is not open")
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                name = pygame.key.name(event.key)
                if is_quit_key(name):
                    return False
                self._keypad.press(name)
            elif event.type == pygame.KEYUP:
                self._keypad.release(pygame.key.name(event.key))
        return True
