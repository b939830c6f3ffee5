"""Square-wave beeper triggered when the sound timer expires."""

from __future__ import annotations

from array import array
import math
from typing import Optional

DEFAULT_FREQUENCY = 440.0
AMPLITUDE = 12_000


def square_wave_samples(
    sample_rate: int,
    frequency: float,
    duration_ms: int,
    *,
    amplitude: int = AMPLITUDE,
) -> array:
    """Return signed 16-bit mono samples of a band-limited square wave."""

    if sample_rate <= 0 or frequency <= 0.0:
        raise ValueError("sample rate and frequency must be positive")

    total = max(1, sample_rate * max(0, duration_ms) // 1000)
    rank = int(((sample_rate / (2.0 * frequency)) + 1.0) / 2.0)
    rank = max(1, min(30, rank))
    scale = (4.0 / math.pi) * amplitude

    samples = array("h")
    for index in range(total):
        phase = 2.0 * math.pi * frequency * index / sample_rate
        value = 0.0
        for harmonic in range(rank):
            k = 2 * harmonic + 1
            value += math.sin(k * phase) / k
        value = max(-amplitude, min(amplitude, value * scale))
        samples.append(int(value))
    return samples


class SquareWaveBeeper:
    """Play a short square-wave tone through pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = DEFAULT_FREQUENCY,
        volume: float = 0.35,
        duration_ms: int = 120,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._duration_ms = max(1, duration_ms)
        self._sound: Optional["pygame.mixer.Sound"] = None

    def beep(self) -> None:
        """Start the tone; a beep already playing is restarted."""

        sound = self._sound
        if sound is None:
            sound = self._build_sound()
            if sound is None:
                return
            sound.set_volume(self._volume)
            self._sound = sound
        sound.stop()
        sound.play(maxtime=self._duration_ms)

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        if self._sound is not None:
            self._sound.stop()
        self._sound = None

    def _build_sound(self) -> Optional["pygame.mixer.Sound"]:
        samples = square_wave_samples(self._sample_rate, self._frequency, self._duration_ms)
        try:
            return self._pygame.mixer.Sound(buffer=samples.tobytes())
        except self._pygame.error:  # pragma: no cover - pygame error path
            return None


__all__ = ["SquareWaveBeeper", "square_wave_samples"]
