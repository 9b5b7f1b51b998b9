"""Application layer."""

from .album_service import AlbumReport, MeasureAlbum, MeasuredTrack, WriteLoudnessTags
from .event_publisher import EventPublisher, NullEventPublisher

__all__ = [
    "AlbumReport",
    "EventPublisher",
    "MeasureAlbum",
    "MeasuredTrack",
    "NullEventPublisher",
    "WriteLoudnessTags",
]
