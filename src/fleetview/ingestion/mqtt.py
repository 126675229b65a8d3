"""MQTT ingestion helpers.

This module translates decoded MQTT messages into normalized feed events.
"""

from __future__ import annotations

from fleetview._mqtt import FeedMessage
from fleetview.config import FeedTopics
from fleetview.ingestion.normalize import parse_feed_message
from fleetview.state.events import FeedEvent, FeedEventKind, FeedSource


def topic_kind(topic: str, topics: FeedTopics) -> FeedEventKind | None:
    """Event kind implied by the topic a message arrived on, if any."""
    if topic == topics.deletions:
        return FeedEventKind.VEHICLE_DELETE
    if topic == topics.alerts:
        return FeedEventKind.ALERT
    if topic == topics.vehicles:
        return FeedEventKind.VEHICLE_UPDATE
    return None


def build_event_from_message(message: FeedMessage, topics: FeedTopics) -> FeedEvent:
    """Build a feed event from a decoded MQTT message.

    Raises :class:`~fleetview.exceptions.FleetViewPayloadError` for
    malformed messages.
    """
    return parse_feed_message(
        message.payload,
        kind=topic_kind(message.topic, topics),
        source=FeedSource.MQTT,
    )
