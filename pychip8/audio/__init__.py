"""Audio output for the CHIP-8 tone signal."""

from .beeper import SquareWaveBeeper, square_wave_samples

__all__ = ["SquareWaveBeeper", "square_wave_samples"]
