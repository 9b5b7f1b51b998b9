"""Audio decode adapters backed by pedalboard."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from pedalboard.io import AudioFile

DEFAULT_CHUNK_FRAMES = 65_536


@dataclass(frozen=True, slots=True)
class AudioStream:
    """Decoded PCM of one file, delivered as channel-first float chunks."""

    sample_rate_hz: float
    channel_count: int
    chunks: Iterator[np.ndarray]


@contextmanager
def open_audio_stream(path: Path, chunk_frames: int = DEFAULT_CHUNK_FRAMES) -> Iterator[AudioStream]:
    """Open ``path`` for chunked reading; the file closes when the block exits."""

    if chunk_frames < 1:
        raise ValueError("chunk_frames must be >= 1")

    with AudioFile(str(path), "r") as audio_file:

        def _chunks() -> Iterator[np.ndarray]:
            # frames is an estimate for some formats; stop at the first empty read.
            while audio_file.tell() < audio_file.frames:
                chunk = audio_file.read(chunk_frames)
                if chunk.shape[-1] == 0:
                    return
                yield chunk

        yield AudioStream(
            sample_rate_hz=float(audio_file.samplerate),
            channel_count=int(audio_file.num_channels),
            chunks=_chunks(),
        )


def write_audio_file(path: Path, audio: np.ndarray, sample_rate: float) -> None:
    """Write channel-first float audio to disk."""

    frames = np.atleast_2d(np.asarray(audio, dtype=np.float32))
    with AudioFile(str(path), "w", sample_rate, frames.shape[0]) as output_file:
        output_file.write(frames)
