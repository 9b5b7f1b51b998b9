"""BS.1770 loudness tags in FLAC Vorbis comments, backed by mutagen."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path

from mutagen.flac import FLAC

from bs1770.gating import GatedPower
from bs1770.utils.config import TagConfig

logger = logging.getLogger(__name__)

_LUFS_SUFFIX = " LUFS"


def parse_lufs(value: str) -> float | None:
    """Parse a tag value such as ``"-9.123 LUFS"``; malformed values give None."""

    if not value.endswith(_LUFS_SUFFIX):
        return None
    try:
        number = float(value[: -len(_LUFS_SUFFIX)])
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def format_lufs(lkfs: float) -> str:
    return f"{lkfs:.3f}{_LUFS_SUFFIX}"


@dataclass(frozen=True, slots=True)
class LoudnessTags:
    """Loudness tags currently stored in a file."""

    track_lkfs: float | None
    album_lkfs: float | None
    has_track_tag: bool
    has_album_tag: bool

    @property
    def complete(self) -> bool:
        return self.has_track_tag and self.has_album_tag


def _differs(current: float | None, new: GatedPower, tolerance_lu: float) -> bool:
    if not new.is_defined:
        return False
    if current is None:
        return True
    return abs(new.lkfs - current) > tolerance_lu


class FlacLoudnessTagger:
    """Reads and writes track and album loudness tags of FLAC files."""

    def __init__(self, config: TagConfig | None = None) -> None:
        self.config = config or TagConfig()

    def _first_value(self, audio: FLAC, key: str) -> str | None:
        values = audio.get(key) if audio.tags is not None else None
        return values[0] if values else None

    def read(self, path: Path) -> LoudnessTags:
        audio = FLAC(str(path))
        track_value = self._first_value(audio, self.config.track_tag)
        album_value = self._first_value(audio, self.config.album_tag)
        return LoudnessTags(
            track_lkfs=parse_lufs(track_value) if track_value is not None else None,
            album_lkfs=parse_lufs(album_value) if album_value is not None else None,
            has_track_tag=track_value is not None,
            has_album_tag=album_value is not None,
        )

    def needs_update(self, current: LoudnessTags, track: GatedPower, album: GatedPower) -> bool:
        """True when either stored value is missing or off by more than the tolerance."""

        tolerance = self.config.tolerance_lu
        return _differs(current.track_lkfs, track, tolerance) or _differs(current.album_lkfs, album, tolerance)

    def write(self, path: Path, track: GatedPower, album: GatedPower) -> bool:
        """Store the loudness tags, returning whether the file was rewritten."""

        if not self.needs_update(self.read(path), track, album):
            return False

        audio = FLAC(str(path))
        if audio.tags is None:
            audio.add_tags()

        for key in self.config.excluded_tags:
            if key in audio:
                del audio[key]

        for key, value in ((self.config.track_tag, track), (self.config.album_tag, album)):
            if value.is_defined:
                audio[key] = [format_lufs(value.lkfs)]
            else:
                logger.warning("Loudness of %s is undefined; removing %s.", path.name, key)
                if key in audio:
                    del audio[key]

        audio.save()
        return True
