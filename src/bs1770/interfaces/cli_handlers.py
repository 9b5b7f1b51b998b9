"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

import math
from pathlib import Path
from uuid import uuid4

from bs1770.application.album_service import AlbumReport, MeasureAlbum, WriteLoudnessTags
from bs1770.channels import default_layout
from bs1770.gating import GatedPower
from bs1770.infrastructure.flac_tags import FlacLoudnessTagger
from bs1770.infrastructure.logging_event_publisher import LoggingEventPublisher
from bs1770.infrastructure.pedalboard_codec import open_audio_stream
from bs1770.integrator import PowerIntegrator
from bs1770.utils.config import MeterSettings
from bs1770.waveform import render_waveform_svg

_event_publisher = LoggingEventPublisher()


def format_loudness(gated_power: GatedPower) -> str:
    """Right-aligned loudness column; undefined loudness shows as ``-inf``."""

    return f"{gated_power.lkfs_or(-math.inf):>5.1f} LKFS"


def summary_lines(report: AlbumReport) -> list[str]:
    lines = [f"{format_loudness(track.loudness.gated_power)}  {track.path.name}" for track in report.tracks]
    if report.tracks:
        lines.append(f"{format_loudness(report.album.gated_power)}  ALBUM")
    return lines


def analyze_paths(
    paths: list[Path],
    settings: MeterSettings,
    skip_when_tags_present: bool = False,
    write_tags: bool = False,
) -> tuple[AlbumReport, int]:
    """Measure ``paths`` as one album and optionally tag them.

    Returns the report and the number of files whose tags were rewritten.
    """

    correlation_id = str(uuid4())
    tagger = FlacLoudnessTagger(settings.tags)
    measure = MeasureAlbum(settings=settings, tagger=tagger, event_publisher=_event_publisher)
    report = measure.measure_paths(paths, skip_when_tags_present=skip_when_tags_present, correlation_id=correlation_id)

    updated = 0
    if write_tags and report.tracks:
        writer = WriteLoudnessTags(tagger=tagger, event_publisher=_event_publisher)
        updated = writer.write_report(report, correlation_id=correlation_id)
    return report, updated


def render_waveform(path: Path, settings: MeterSettings) -> str:
    with open_audio_stream(path, settings.chunk_frames) as stream:
        layout = settings.channel_layout() or default_layout(stream.channel_count)
        integrator = PowerIntegrator(stream.sample_rate_hz, layout)
        for chunk in stream.chunks:
            integrator.push(chunk)
    return render_waveform_svg(integrator.channel_windows)
