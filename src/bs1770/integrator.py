"""Windowed power integration over K-weighted audio.

Each channel is K-weighted and cut into consecutive 100 ms windows whose mean
square is recorded. Every completed window closes one 400 ms gating block made
of the four most recent windows, so consecutive blocks overlap by 75 %. A block
is only emitted once all four of its windows are complete; trailing audio that
does not fill a block is never reported.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Sequence

import numpy as np

from .channels import ChannelRole, default_layout, validate_layout
from .filters import KWeightingFilter, validate_sample_rate

WINDOW_SECONDS = 0.1
WINDOWS_PER_BLOCK = 4


def samples_per_window(sample_rate_hz: float) -> int:
    """Number of samples in one 100 ms hop at ``sample_rate_hz``."""

    rate = validate_sample_rate(sample_rate_hz)
    return max(1, int(round(rate * WINDOW_SECONDS)))


def ensure_channel_first(audio: np.ndarray) -> np.ndarray:
    """Return ``audio`` as a float64 ``(channels, frames)`` array."""

    array = np.asarray(audio, dtype=np.float64)
    if array.ndim == 1:
        return array[np.newaxis, :]
    if array.ndim != 2:
        raise ValueError("Audio must be a 1D mono or 2D channel-first array.")
    return array


class ChannelMeter:
    """K-weights one channel and records the power of its 100 ms windows."""

    def __init__(self, sample_rate_hz: float) -> None:
        self.filter = KWeightingFilter(sample_rate_hz)
        self.window_length = samples_per_window(self.filter.sample_rate_hz)
        self._pending = np.empty(0, dtype=np.float64)
        self._windows: list[float] = []

    @property
    def windows(self) -> tuple[float, ...]:
        return tuple(self._windows)

    def push(self, samples: np.ndarray) -> list[float]:
        """Feed raw samples, returning the powers of windows completed by them."""

        filtered = self.filter.process(samples)
        buffered = np.concatenate((self._pending, filtered)) if self._pending.size else filtered

        complete = buffered.size // self.window_length
        completed = []
        for index in range(complete):
            window = buffered[index * self.window_length : (index + 1) * self.window_length]
            completed.append(float(np.mean(np.square(window))))

        self._pending = buffered[complete * self.window_length :].copy()
        self._windows.extend(completed)
        return completed


class PowerIntegrator:
    """Turns a multichannel sample stream into channel-weighted block powers."""

    def __init__(self, sample_rate_hz: float, layout: Sequence[ChannelRole]) -> None:
        self.sample_rate_hz = validate_sample_rate(sample_rate_hz)
        self.layout = tuple(layout)
        self.weights = validate_layout(self.layout)
        self._meters = [ChannelMeter(self.sample_rate_hz) for _ in self.layout]
        self._recent = [deque(maxlen=WINDOWS_PER_BLOCK) for _ in self.layout]
        self._blocks: list[float] = []

    @property
    def blocks(self) -> tuple[float, ...]:
        return tuple(self._blocks)

    @property
    def channel_windows(self) -> tuple[tuple[float, ...], ...]:
        return tuple(meter.windows for meter in self._meters)

    def push(self, frames: np.ndarray) -> list[float]:
        """Feed a ``(channels, n)`` chunk and return the blocks it closed."""

        audio = ensure_channel_first(frames)
        if audio.shape[0] != len(self._meters):
            raise ValueError(
                f"Expected {len(self._meters)} channels for layout "
                f"{[role.value for role in self.layout]}, got {audio.shape[0]}."
            )

        new_windows = [meter.push(channel) for meter, channel in zip(self._meters, audio)]
        closed = []
        for index in range(len(new_windows[0])):
            for recent, windows in zip(self._recent, new_windows):
                recent.append(windows[index])
            if len(self._recent[0]) < WINDOWS_PER_BLOCK:
                continue
            closed.append(
                sum(
                    weight * (sum(recent) / WINDOWS_PER_BLOCK)
                    for weight, recent in zip(self.weights, self._recent)
                )
            )

        self._blocks.extend(closed)
        return closed


def iter_block_powers(
    chunks: Iterable[np.ndarray],
    sample_rate_hz: float,
    layout: Sequence[ChannelRole] | None = None,
) -> Iterator[float]:
    """Lazily yield block powers for a stream of channel-first chunks.

    The sample rate and an explicit ``layout`` are validated before the first
    chunk is consumed. Without a layout the conventional one for the channel
    count of the first chunk is used.
    """

    rate = validate_sample_rate(sample_rate_hz)
    integrator = PowerIntegrator(rate, layout) if layout is not None else None
    return _drive(chunks, rate, integrator)


def _drive(
    chunks: Iterable[np.ndarray], rate: float, integrator: PowerIntegrator | None
) -> Iterator[float]:
    for chunk in chunks:
        audio = ensure_channel_first(chunk)
        if integrator is None:
            integrator = PowerIntegrator(rate, default_layout(audio.shape[0]))
        yield from integrator.push(audio)
