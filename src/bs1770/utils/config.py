from __future__ import annotations

from pathlib import Path

import json

from pydantic import BaseModel, Field, field_validator

from bs1770.channels import ChannelRole, parse_layout

DEFAULT_EXCLUDED_TAGS: tuple[str, ...] = (
    "REPLAYGAIN_ALBUM_GAIN",
    "REPLAYGAIN_ALBUM_PEAK",
    "REPLAYGAIN_REFERENCE_LOUDNESS",
    "REPLAYGAIN_TRACK_GAIN",
    "REPLAYGAIN_TRACK_PEAK",
)


class TagConfig(BaseModel):
    track_tag: str = "BS17704_TRACK_LOUDNESS"
    album_tag: str = "BS17704_ALBUM_LOUDNESS"
    tolerance_lu: float = Field(0.1, ge=0.0)
    excluded_tags: tuple[str, ...] = DEFAULT_EXCLUDED_TAGS

    @field_validator("track_tag", "album_tag")
    @classmethod
    def _validate_tag_name(cls, value: str) -> str:
        value = value.strip().upper()
        if not value or "=" in value:
            raise ValueError("Tag names must be non-empty and must not contain '='.")
        return value

    @field_validator("excluded_tags")
    @classmethod
    def _upper_excluded(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(tag.strip().upper() for tag in value)


class MeterSettings(BaseModel):
    jobs: int = Field(1, ge=1, le=64)
    chunk_frames: int = Field(65_536, ge=1)
    layout: list[str] | None = None
    tags: TagConfig = Field(default_factory=TagConfig)

    @field_validator("layout")
    @classmethod
    def _validate_layout(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        if not value:
            raise ValueError("layout must name at least one channel when provided.")
        # Raises UnsupportedChannelLayout, a ValueError, for unknown labels.
        parse_layout(value)
        return value

    def channel_layout(self) -> tuple[ChannelRole, ...] | None:
        return parse_layout(self.layout) if self.layout is not None else None


def load_settings(path: Path | None) -> MeterSettings:
    if path is None:
        return MeterSettings()
    data = _load_config_data(path)
    return MeterSettings.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
