"""Track and album loudness measurement built on the integrator and gate."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from .channels import ChannelRole
from .gating import GatedPower, album_gated_mean, gated_mean
from .integrator import iter_block_powers


@dataclass(frozen=True, slots=True)
class TrackLoudness:
    """Block powers of one track and their gated mean."""

    block_powers: tuple[float, ...]
    gated_power: GatedPower

    @property
    def lkfs(self) -> float | None:
        return self.gated_power.lkfs if self.gated_power.is_defined else None


@dataclass(frozen=True, slots=True)
class AlbumLoudness:
    """Per-track results and the loudness of all their blocks pooled."""

    tracks: tuple[TrackLoudness, ...]
    gated_power: GatedPower

    @property
    def lkfs(self) -> float | None:
        return self.gated_power.lkfs if self.gated_power.is_defined else None


def _as_chunks(audio: np.ndarray | Iterable[np.ndarray]) -> Iterable[np.ndarray]:
    if isinstance(audio, np.ndarray):
        return [audio]
    # Plain nested lists of samples are one array, not a stream of 1-D chunks.
    if isinstance(audio, Sequence) and audio and not any(isinstance(item, np.ndarray) for item in audio):
        return [np.asarray(audio, dtype=np.float64)]
    return audio


def measure_track(
    audio: np.ndarray | Iterable[np.ndarray],
    sample_rate_hz: float,
    layout: Sequence[ChannelRole] | None = None,
) -> TrackLoudness:
    """Measure integrated loudness of a track.

    ``audio`` is either one channel-first array (1-D for mono, nested lists
    accepted) or an iterable of ndarray chunks in stream order.
    """

    block_powers = tuple(iter_block_powers(_as_chunks(audio), sample_rate_hz, layout))
    return TrackLoudness(block_powers=block_powers, gated_power=gated_mean(block_powers))


def measure_album(tracks: Iterable[TrackLoudness]) -> AlbumLoudness:
    """Combine fully measured tracks into an album measurement."""

    tracks = tuple(tracks)
    return AlbumLoudness(
        tracks=tracks,
        gated_power=album_gated_mean(track.block_powers for track in tracks),
    )
