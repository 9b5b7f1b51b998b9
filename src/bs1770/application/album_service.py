"""Application services measuring albums of audio files and tagging them."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from bs1770.application.event_publisher import EventPublisher, NullEventPublisher
from bs1770.channels import default_layout
from bs1770.domain.events import AlbumMeasured, MeasurementFailed, TagsWritten, TrackMeasured, TrackSkipped
from bs1770.errors import UnsupportedChannelLayout
from bs1770.infrastructure.flac_tags import FlacLoudnessTagger
from bs1770.infrastructure.pedalboard_codec import open_audio_stream
from bs1770.meter import AlbumLoudness, TrackLoudness, measure_album, measure_track
from bs1770.utils.config import MeterSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MeasuredTrack:
    path: Path
    loudness: TrackLoudness


@dataclass(frozen=True, slots=True)
class AlbumReport:
    """Measured tracks in input order, the pooled album result and skipped files."""

    tracks: tuple[MeasuredTrack, ...]
    album: AlbumLoudness
    skipped: tuple[Path, ...] = ()


@dataclass(slots=True)
class MeasureAlbum:
    """Use case that measures every file of an album and pools their blocks."""

    settings: MeterSettings = field(default_factory=MeterSettings)
    tagger: FlacLoudnessTagger | None = None
    event_publisher: EventPublisher = NullEventPublisher()

    def measure_file(self, path: Path, correlation_id: str | None = None) -> TrackLoudness:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            with open_audio_stream(path, self.settings.chunk_frames) as stream:
                layout = self.settings.channel_layout() or default_layout(stream.channel_count)
                if len(layout) != stream.channel_count:
                    raise UnsupportedChannelLayout(
                        f"{path.name} has {stream.channel_count} channels but the layout names {len(layout)}."
                    )
                loudness = measure_track(stream.chunks, stream.sample_rate_hz, layout)
        except Exception as error:  # noqa: BLE001
            self.event_publisher.publish(
                MeasurementFailed(
                    correlation_id=run_correlation_id,
                    payload_summary={"path": path.as_posix(), "error": str(error)},
                )
            )
            raise

        self.event_publisher.publish(
            TrackMeasured(
                correlation_id=run_correlation_id,
                payload_summary={
                    "path": path.as_posix(),
                    "block_count": len(loudness.block_powers),
                    "lkfs": loudness.lkfs,
                },
            )
        )
        return loudness

    def _already_tagged(self, path: Path) -> bool:
        tagger = self.tagger or FlacLoudnessTagger(self.settings.tags)
        return tagger.read(path).complete

    def measure_paths(
        self,
        paths: list[Path],
        skip_when_tags_present: bool = False,
        correlation_id: str | None = None,
    ) -> AlbumReport:
        run_correlation_id = correlation_id or str(uuid4())

        to_measure: list[Path] = []
        skipped: list[Path] = []
        for path in paths:
            if skip_when_tags_present and self._already_tagged(path):
                skipped.append(path)
                self.event_publisher.publish(
                    TrackSkipped(correlation_id=run_correlation_id, payload_summary={"path": path.as_posix()})
                )
                continue
            to_measure.append(path)

        # Tracks are independent; the album result waits for all of them.
        with ThreadPoolExecutor(max_workers=self.settings.jobs) as executor:
            futures = [executor.submit(self.measure_file, path, run_correlation_id) for path in to_measure]
            measured = [MeasuredTrack(path=path, loudness=future.result()) for path, future in zip(to_measure, futures)]

        album = measure_album(track.loudness for track in measured)
        self.event_publisher.publish(
            AlbumMeasured(
                correlation_id=run_correlation_id,
                payload_summary={
                    "track_count": len(measured),
                    "skipped_count": len(skipped),
                    "lkfs": album.lkfs,
                },
            )
        )
        return AlbumReport(tracks=tuple(measured), album=album, skipped=tuple(skipped))


@dataclass(slots=True)
class WriteLoudnessTags:
    """Use case that stores track and album loudness in the measured files."""

    tagger: FlacLoudnessTagger = field(default_factory=FlacLoudnessTagger)
    event_publisher: EventPublisher = NullEventPublisher()

    def write_report(self, report: AlbumReport, correlation_id: str | None = None) -> int:
        """Update tags that are missing or stale, returning the number of files rewritten."""

        run_correlation_id = correlation_id or str(uuid4())
        updated = 0
        for track in report.tracks:
            if not self.tagger.write(track.path, track.loudness.gated_power, report.album.gated_power):
                logger.debug("Tags of %s are up to date.", track.path.name)
                continue
            updated += 1
            self.event_publisher.publish(
                TagsWritten(
                    correlation_id=run_correlation_id,
                    payload_summary={
                        "path": track.path.as_posix(),
                        "track_lkfs": track.loudness.lkfs,
                        "album_lkfs": report.album.lkfs,
                    },
                )
            )
        return updated
