"""Feed payload normalization.

Turns decoded channel messages and REST records into typed feed events.
Validation happens here, at the ingestion boundary: a payload either
becomes a complete event or raises :class:`FleetViewPayloadError`, so the
state layer never sees a partially valid record.

Channel messages use a small envelope::

    {"type": "vehicle_update", "data": {...vehicle record...}}
    {"type": "vehicle_delete", "data": {"id": "v1"}}
    {"type": "alert", "data": {...alert record...}}

When the carrying topic already determines the event kind, the bare
record is accepted as well.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from fleetview.exceptions import FleetViewPayloadError
from fleetview.models.alert import Alert
from fleetview.models.vehicle import Vehicle
from fleetview.state.events import (
    AlertRaised,
    FeedEvent,
    FeedEventKind,
    FeedSource,
    VehicleDeleted,
    VehicleUpdated,
)

_ENVELOPE_TYPE_KEYS = ("type", "event")
_ENVELOPE_DATA_KEYS = ("data", "payload")

# Aliases seen from upstream publishers for the same event kinds.
_KIND_ALIASES: dict[str, FeedEventKind] = {
    "vehicle_update": FeedEventKind.VEHICLE_UPDATE,
    "vehicle_updated": FeedEventKind.VEHICLE_UPDATE,
    "vehicle": FeedEventKind.VEHICLE_UPDATE,
    "vehicle_delete": FeedEventKind.VEHICLE_DELETE,
    "vehicle_deleted": FeedEventKind.VEHICLE_DELETE,
    "alert": FeedEventKind.ALERT,
    "new_alert": FeedEventKind.ALERT,
}


def _payload_error(kind: FeedEventKind | str, exc: ValidationError) -> FleetViewPayloadError:
    fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
    return FleetViewPayloadError(
        f"Malformed {kind} payload: invalid or missing {', '.join(fields) or 'fields'}",
        kind=str(kind),
        errors=[dict(err) for err in exc.errors(include_url=False)],
    )


def resolve_kind(value: Any) -> FeedEventKind | None:
    """Map an envelope ``type`` string to an event kind; ``None`` if unrecognized."""
    if isinstance(value, FeedEventKind):
        return value
    if not isinstance(value, str):
        return None
    return _KIND_ALIASES.get(value.strip().lower().replace("-", "_"))


def parse_vehicle(data: Mapping[str, Any]) -> Vehicle:
    try:
        return Vehicle.model_validate(dict(data))
    except ValidationError as exc:
        raise _payload_error(FeedEventKind.VEHICLE_UPDATE, exc) from exc


def parse_alert(data: Mapping[str, Any]) -> Alert:
    try:
        return Alert.model_validate(dict(data))
    except ValidationError as exc:
        raise _payload_error(FeedEventKind.ALERT, exc) from exc


def build_event(
    kind: FeedEventKind,
    data: Mapping[str, Any],
    *,
    source: FeedSource = FeedSource.LOCAL,
) -> FeedEvent:
    """Validate *data* as the record for *kind* and wrap it in a feed event."""
    if kind == FeedEventKind.VEHICLE_UPDATE:
        return VehicleUpdated(vehicle=parse_vehicle(data), source=source)
    if kind == FeedEventKind.ALERT:
        return AlertRaised(alert=parse_alert(data), source=source)
    vehicle_id = data.get("id", data.get("vehicleId"))
    try:
        return VehicleDeleted(vehicle_id=vehicle_id, source=source)
    except ValidationError as exc:
        raise _payload_error(kind, exc) from exc


def parse_feed_message(
    message: Mapping[str, Any],
    *,
    kind: FeedEventKind | None = None,
    source: FeedSource = FeedSource.MQTT,
) -> FeedEvent:
    """Parse one decoded channel message into a feed event.

    Parameters
    ----------
    message
        Decoded JSON object, either an envelope or a bare record.
    kind
        Event kind implied by the transport (e.g. the topic). An envelope
        ``type`` takes precedence when present and recognized.
    source
        Ingestion path recorded on the event.

    Raises
    ------
    FleetViewPayloadError
        If the kind cannot be determined or the record is invalid.
    """
    if not isinstance(message, Mapping):
        raise FleetViewPayloadError("Feed message is not a JSON object")

    envelope_kind: FeedEventKind | None = None
    for key in _ENVELOPE_TYPE_KEYS:
        if key in message:
            envelope_kind = resolve_kind(message[key])
            break

    data: Any = message
    for key in _ENVELOPE_DATA_KEYS:
        candidate = message.get(key)
        if isinstance(candidate, Mapping):
            data = candidate
            break

    resolved = envelope_kind or kind
    if resolved is None:
        raise FleetViewPayloadError(
            f"Cannot determine event kind for feed message (type={message.get('type')!r})",
        )
    return build_event(resolved, data, source=source)
