from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from fleetview.engine import FleetEngine
from fleetview.exceptions import FleetViewPayloadError
from fleetview.ingestion.normalize import build_event, parse_feed_message, resolve_kind
from fleetview.models.alert import AlertType
from fleetview.models.vehicle import VehicleStatus
from fleetview.state.events import (
    AlertRaised,
    FeedEventKind,
    FeedSource,
    VehicleDeleted,
    VehicleUpdated,
)

Payload = Callable[..., dict[str, Any]]


def test_envelope_vehicle_update_maps_camel_case(vehicle_data: Payload) -> None:
    event = parse_feed_message({"type": "vehicle_update", "data": vehicle_data("v7", currentSpeed=64.5)})

    assert isinstance(event, VehicleUpdated)
    assert event.source == FeedSource.MQTT
    vehicle = event.vehicle
    assert vehicle.id == "v7"
    assert vehicle.license_plate == "ABC-V7"
    assert vehicle.vehicle_model == "Sprinter 415"
    assert vehicle.current_speed == 64.5
    assert vehicle.status == VehicleStatus.MOVING
    assert vehicle.last_update == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    assert vehicle.battery_level == 87


def test_envelope_alert(alert_data: Payload) -> None:
    event = parse_feed_message({"type": "alert", "data": alert_data("a9", "v2")})

    assert isinstance(event, AlertRaised)
    assert event.alert.id == "a9"
    assert event.alert.vehicle_id == "v2"
    assert event.alert.read is False


@pytest.mark.parametrize("key", ["id", "vehicleId"])
def test_envelope_delete_accepts_either_id_key(key: str) -> None:
    event = parse_feed_message({"type": "vehicle_delete", "data": {key: " v3 "}})

    assert isinstance(event, VehicleDeleted)
    assert event.vehicle_id == "v3"


def test_bare_record_uses_transport_kind(vehicle_data: Payload) -> None:
    event = parse_feed_message(vehicle_data("v1"), kind=FeedEventKind.VEHICLE_UPDATE)

    assert isinstance(event, VehicleUpdated)


def test_envelope_type_wins_over_transport_kind(alert_data: Payload) -> None:
    event = parse_feed_message({"type": "alert", "data": alert_data()}, kind=FeedEventKind.VEHICLE_UPDATE)

    assert isinstance(event, AlertRaised)


def test_unknown_kind_is_rejected(vehicle_data: Payload) -> None:
    with pytest.raises(FleetViewPayloadError):
        parse_feed_message(vehicle_data("v1"))

    with pytest.raises(FleetViewPayloadError):
        parse_feed_message({"type": "telemetry", "data": vehicle_data("v1")})


def test_non_object_message_is_rejected() -> None:
    with pytest.raises(FleetViewPayloadError):
        parse_feed_message(["not", "an", "object"])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("vehicle_update", FeedEventKind.VEHICLE_UPDATE),
        ("vehicle-updated", FeedEventKind.VEHICLE_UPDATE),
        (" Vehicle_Deleted ", FeedEventKind.VEHICLE_DELETE),
        ("new_alert", FeedEventKind.ALERT),
        ("position", None),
        (42, None),
    ],
)
def test_resolve_kind_aliases(alias: Any, expected: FeedEventKind | None) -> None:
    assert resolve_kind(alias) == expected


def test_epoch_millisecond_and_second_timestamps(vehicle_data: Payload) -> None:
    millis = build_event(FeedEventKind.VEHICLE_UPDATE, vehicle_data(lastUpdate=1_767_268_800_000))
    seconds = build_event(FeedEventKind.VEHICLE_UPDATE, vehicle_data(lastUpdate="1767268800"))

    assert isinstance(millis, VehicleUpdated) and isinstance(seconds, VehicleUpdated)
    assert millis.vehicle.last_update == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    assert seconds.vehicle.last_update == millis.vehicle.last_update


@pytest.mark.parametrize(
    "overrides",
    [
        {"status": "parked"},
        {"ignition": "maybe"},
        {"currentSpeed": -5},
        {"latitude": 91},
        {"currentSpeed": "fast"},
        {"lastUpdate": "yesterday"},
        {"id": "   "},
        {"name": None},
        {"heading": "nan"},
        {"heading": "inf"},
        {"heading": [90]},
    ],
)
def test_malformed_vehicle_is_rejected_without_side_effects(vehicle_data: Payload, overrides: dict[str, Any]) -> None:
    engine = FleetEngine()

    with pytest.raises(FleetViewPayloadError) as excinfo:
        engine.apply(parse_feed_message({"type": "vehicle_update", "data": vehicle_data("v1", **overrides)}))

    assert excinfo.value.kind == FeedEventKind.VEHICLE_UPDATE
    assert excinfo.value.errors
    assert len(engine.store) == 0


def test_missing_required_field_is_named_in_error(vehicle_data: Payload) -> None:
    data = vehicle_data()
    del data["licensePlate"]

    with pytest.raises(FleetViewPayloadError, match="licensePlate"):
        build_event(FeedEventKind.VEHICLE_UPDATE, data)


@pytest.mark.parametrize("field", ["heading", "accuracy", "licensePlate", "lastUpdate"])
def test_vehicle_missing_field_is_rejected(vehicle_data: Payload, field: str) -> None:
    data = vehicle_data()
    del data[field]

    with pytest.raises(FleetViewPayloadError, match=field):
        parse_feed_message({"type": "vehicle_update", "data": data})


def test_alert_missing_message_is_rejected(alert_data: Payload) -> None:
    data = alert_data()
    del data["message"]

    with pytest.raises(FleetViewPayloadError, match="message"):
        parse_feed_message({"type": "alert", "data": data})


def test_heading_outside_range_is_wrapped(vehicle_data: Payload) -> None:
    event = parse_feed_message({"type": "vehicle_update", "data": vehicle_data(heading="725.5")})

    assert isinstance(event, VehicleUpdated)
    assert 0 <= event.vehicle.heading < 360
    assert event.vehicle.heading == pytest.approx(5.5)


def test_unknown_alert_type_is_kept(alert_data: Payload) -> None:
    event = build_event(FeedEventKind.ALERT, alert_data(type="harsh_braking"))

    assert isinstance(event, AlertRaised)
    assert event.alert.type == AlertType.UNKNOWN


def test_unknown_alert_priority_is_rejected(alert_data: Payload) -> None:
    with pytest.raises(FleetViewPayloadError):
        build_event(FeedEventKind.ALERT, alert_data(priority="urgent"))


def test_delete_without_id_is_rejected() -> None:
    with pytest.raises(FleetViewPayloadError):
        build_event(FeedEventKind.VEHICLE_DELETE, {"reason": "decommissioned"})


def test_unknown_fields_are_ignored(vehicle_data: Payload) -> None:
    event = build_event(FeedEventKind.VEHICLE_UPDATE, vehicle_data(driver="Ana", odometer=12345))

    assert isinstance(event, VehicleUpdated)
    assert not hasattr(event.vehicle, "driver")
