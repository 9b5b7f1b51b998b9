from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from bs1770.infrastructure.pedalboard_codec import write_audio_file


def sine(frequency_hz: float, level_dbfs: float, sample_rate: float, duration_s: float) -> np.ndarray:
    t = np.arange(int(round(sample_rate * duration_s)), dtype=np.float64) / sample_rate
    return 10.0 ** (level_dbfs / 20.0) * np.sin(2.0 * np.pi * frequency_hz * t)


@pytest.fixture
def stereo_tone():
    """Factory for a channel-first stereo 1 kHz tone."""

    def _make(level_dbfs: float, duration_s: float, sample_rate: float = 48_000) -> np.ndarray:
        mono = sine(1_000.0, level_dbfs, sample_rate, duration_s)
        return np.vstack((mono, mono))

    return _make


@pytest.fixture
def noise():
    rng = np.random.default_rng(1770)

    def _make(channels: int, frames: int) -> np.ndarray:
        return 0.25 * rng.standard_normal((channels, frames))

    return _make


@pytest.fixture
def flac_track(tmp_path: Path, stereo_tone):
    """Factory writing a stereo 1 kHz FLAC file at the given level."""

    def _make(name: str, level_dbfs: float, duration_s: float = 5.0, sample_rate: int = 44_100) -> Path:
        path = tmp_path / name
        write_audio_file(path, stereo_tone(level_dbfs, duration_s, sample_rate), sample_rate)
        return path

    return _make
