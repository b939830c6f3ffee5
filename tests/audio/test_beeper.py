"""Tests for square-wave sample generation."""

from __future__ import annotations

import pytest

from pychip8.audio import square_wave_samples


def test_sample_count_matches_duration() -> None:
    samples = square_wave_samples(8000, 440.0, 100)

    assert samples.typecode == "h"
    assert len(samples) == 800


def test_samples_stay_within_amplitude() -> None:
    samples = square_wave_samples(8000, 440.0, 50, amplitude=1000)

    assert max(samples) <= 1000
    assert min(samples) >= -1000
    assert max(samples) > 500
    assert min(samples) < -500


def test_zero_duration_yields_one_sample() -> None:
    assert len(square_wave_samples(8000, 440.0, 0)) == 1


@pytest.mark.parametrize(("rate", "frequency"), [(0, 440.0), (8000, 0.0)])
def test_invalid_parameters(rate: int, frequency: float) -> None:
    with pytest.raises(ValueError):
        square_wave_samples(rate, frequency, 10)
