"""Domain layer."""

from .events import AlbumMeasured, DomainEvent, MeasurementFailed, TagsWritten, TrackMeasured, TrackSkipped

__all__ = [
    "DomainEvent",
    "TrackMeasured",
    "TrackSkipped",
    "AlbumMeasured",
    "TagsWritten",
    "MeasurementFailed",
]
