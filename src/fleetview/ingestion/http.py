"""REST snapshot ingestion.

Loads the vehicle and alert collections used to seed the engine before
(and alongside) the live feed. Individual malformed records are logged and
skipped; the rest of the collection is still applied.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fleetview._redact import redact_for_log
from fleetview._transport import Transport
from fleetview.config import FleetViewConfig
from fleetview.exceptions import FleetViewPayloadError, FleetViewTransportError
from fleetview.ingestion.normalize import build_event
from fleetview.state.events import AlertRaised, FeedEvent, FeedEventKind, FeedSource, VehicleUpdated

_logger = logging.getLogger(__name__)


def _unwrap_collection(decoded: Any, endpoint: str) -> list[Any]:
    # Accept a bare array or the common {"data": [...]} wrapper.
    if isinstance(decoded, dict):
        decoded = decoded.get("data", decoded.get("items"))
    if not isinstance(decoded, list):
        raise FleetViewTransportError(f"Expected a JSON array from {endpoint}", endpoint=endpoint)
    return decoded


def _events_from_records(records: list[Any], kind: FeedEventKind) -> list[FeedEvent]:
    events: list[FeedEvent] = []
    for record in records:
        if not isinstance(record, dict):
            _logger.debug("Skipping non-object %s record: %r", kind, redact_for_log(record))
            continue
        try:
            events.append(build_event(kind, record, source=FeedSource.HTTP))
        except FleetViewPayloadError as exc:
            _logger.debug("Skipping malformed %s record: %s payload=%s", kind, exc, redact_for_log(record))
    return events


async def fetch_vehicles(config: FleetViewConfig, transport: Transport) -> list[VehicleUpdated]:
    """Fetch the vehicle collection as full-record update events."""
    endpoint = config.vehicles_path
    records = _unwrap_collection(await transport.get_json(endpoint), endpoint)
    events = _events_from_records(records, FeedEventKind.VEHICLE_UPDATE)
    return [event for event in events if isinstance(event, VehicleUpdated)]


async def fetch_alerts(config: FleetViewConfig, transport: Transport) -> list[AlertRaised]:
    """Fetch the alert collection as alert events."""
    endpoint = config.alerts_path
    records = _unwrap_collection(await transport.get_json(endpoint), endpoint)
    events = _events_from_records(records, FeedEventKind.ALERT)
    return [event for event in events if isinstance(event, AlertRaised)]


async def load_snapshot(
    store_apply: Callable[[FeedEvent], None],
    *,
    config: FleetViewConfig,
    transport: Transport,
) -> tuple[int, int]:
    """Fetch vehicles then alerts and apply them in that order.

    Returns ``(vehicle_count, alert_count)`` of applied events.
    """
    vehicles = await fetch_vehicles(config, transport)
    alerts = await fetch_alerts(config, transport)
    for vehicle_event in vehicles:
        store_apply(vehicle_event)
    for alert_event in alerts:
        store_apply(alert_event)
    return len(vehicles), len(alerts)
