import logging

from bs1770.application.event_publisher import NullEventPublisher
from bs1770.domain.events import AlbumMeasured
from bs1770.infrastructure.logging_event_publisher import LoggingEventPublisher


def test_logging_publisher_emits_structured_record(caplog) -> None:
    event = AlbumMeasured(correlation_id="cid-9", payload_summary={"lkfs": -14.2, "track_count": 3})

    with caplog.at_level(logging.INFO, logger="bs1770.events"):
        LoggingEventPublisher().publish(event)

    record = caplog.records[-1]
    assert record.getMessage() == "domain_event_emitted"
    assert record.event_name == "AlbumMeasured"
    assert record.correlation_id == "cid-9"
    assert record.payload_summary["track_count"] == 3


def test_null_publisher_discards_events() -> None:
    assert NullEventPublisher().publish(AlbumMeasured(correlation_id="x", payload_summary={})) is None
