"""Domain event contracts for loudness measurement workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class TrackMeasured(DomainEvent):
    """A track was decoded and its block powers gated."""


@dataclass(frozen=True, slots=True)
class TrackSkipped(DomainEvent):
    """A track already carried loudness tags and was not measured."""


@dataclass(frozen=True, slots=True)
class AlbumMeasured(DomainEvent):
    """Block powers of every track were pooled into an album loudness."""


@dataclass(frozen=True, slots=True)
class TagsWritten(DomainEvent):
    """Loudness tags of a file were updated."""


@dataclass(frozen=True, slots=True)
class MeasurementFailed(DomainEvent):
    """Measuring a file failed for a correlation id."""
