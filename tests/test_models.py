"""Tests for fleet model parsing and derived properties."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pydantic import ValidationError

from fleetview.models import (
    Alert,
    AlertCategory,
    AlertType,
    FilterKey,
    FleetView,
    TrailPoint,
    Vehicle,
    format_age,
)
from fleetview.models._base import parse_timestamp

Payload = Callable[..., dict[str, Any]]

# ------------------------------------------------------------------
# Vehicle
# ------------------------------------------------------------------


class TestVehicle:
    @pytest.mark.parametrize(
        "raw, expected",
        [(0, 0.0), (359.5, 359.5), (360, 0.0), (450, 90.0), (-90, 270.0)],
    )
    def test_heading_is_normalized(self, vehicle_data: Payload, raw: float, expected: float) -> None:
        vehicle = Vehicle.model_validate(vehicle_data(heading=raw))
        assert vehicle.heading == pytest.approx(expected)

    def test_speeding_is_strict(self, make_vehicle: Callable[..., Vehicle]) -> None:
        assert make_vehicle(currentSpeed=81, speedLimit=80).is_speeding
        assert not make_vehicle(currentSpeed=80, speedLimit=80).is_speeding

    @pytest.mark.parametrize("status, stopped", [("stopped", True), ("idle", True), ("moving", False), ("offline", False)])
    def test_idle_counts_as_stopped(self, make_vehicle: Callable[..., Vehicle], status: str, stopped: bool) -> None:
        assert make_vehicle(status=status).is_stopped is stopped

    def test_position(self, make_vehicle: Callable[..., Vehicle]) -> None:
        assert make_vehicle(latitude=1.5, longitude=-2.5).position == TrailPoint(latitude=1.5, longitude=-2.5)

    def test_records_are_frozen(self, make_vehicle: Callable[..., Vehicle]) -> None:
        vehicle = make_vehicle()
        with pytest.raises(ValidationError):
            vehicle.current_speed = 10  # type: ignore[misc]

    def test_optional_fields_default_when_null(self, vehicle_data: Payload) -> None:
        vehicle = Vehicle.model_validate(vehicle_data(batteryLevel=None, model=None))
        assert vehicle.battery_level is None
        assert vehicle.vehicle_model is None

    @pytest.mark.parametrize("field", ["heading", "accuracy"])
    def test_null_required_field_is_rejected(self, vehicle_data: Payload, field: str) -> None:
        with pytest.raises(ValidationError):
            Vehicle.model_validate(vehicle_data(**{field: None}))

    def test_battery_level_bounds(self, vehicle_data: Payload) -> None:
        with pytest.raises(ValidationError):
            Vehicle.model_validate(vehicle_data(batteryLevel=120))


# ------------------------------------------------------------------
# Alert
# ------------------------------------------------------------------


class TestAlert:
    @pytest.mark.parametrize(
        "alert_type, category",
        [
            ("speed", AlertCategory.SPEED),
            ("geofence_entry", AlertCategory.GEOFENCE),
            ("geofence_exit", AlertCategory.GEOFENCE),
            ("geofence_dwell", AlertCategory.GEOFENCE),
            ("harsh_braking", AlertCategory.OTHER),
        ],
    )
    def test_category(self, make_alert: Callable[..., Alert], alert_type: str, category: AlertCategory) -> None:
        assert make_alert(type=alert_type).category == category

    def test_unknown_type_falls_back(self) -> None:
        assert AlertType("tire_pressure") == AlertType.UNKNOWN

    def test_read_flag_round_trips(self, make_alert: Callable[..., Alert]) -> None:
        alert = make_alert(read=True)
        assert alert.read is True
        assert alert.model_copy(update={"read": False}).read is False


# ------------------------------------------------------------------
# Timestamps
# ------------------------------------------------------------------


class TestTimestamps:
    def test_naive_iso_is_utc(self) -> None:
        assert parse_timestamp("2026-01-01T12:00:00") == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def test_offset_is_preserved(self) -> None:
        parsed = parse_timestamp("2026-01-01T09:00:00-03:00")
        assert parsed == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    @pytest.mark.parametrize("value", [True, "", None, [1, 2]])
    def test_invalid_values_raise(self, value: Any) -> None:
        with pytest.raises(ValueError):
            parse_timestamp(value)

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(seconds=0), "0s"),
            (timedelta(seconds=42), "42s"),
            (timedelta(minutes=5, seconds=10), "5min"),
            (timedelta(hours=3, minutes=59), "3h"),
            (timedelta(days=2), "2025-12-30"),
        ],
    )
    def test_format_age(self, delta: timedelta, expected: str) -> None:
        now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        assert format_age(now - delta, now=now) == expected

    def test_format_age_clamps_future(self) -> None:
        now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        assert format_age(now + timedelta(seconds=30), now=now) == "0s"


# ------------------------------------------------------------------
# View
# ------------------------------------------------------------------


class TestFleetView:
    def test_empty_view_defaults(self) -> None:
        view = FleetView()
        assert view.visible_vehicles == ()
        assert view.selected is None
        assert view.filter_key == FilterKey.ALL
        assert view.unread_total == 0

    def test_filter_counts_are_read_only(self) -> None:
        counts = {FilterKey.ALL: 2, FilterKey.MOVING: 1}
        view = FleetView(filter_counts=counts)

        with pytest.raises(TypeError):
            view.filter_counts[FilterKey.ALL] = 99  # type: ignore[index]
        counts[FilterKey.ALL] = 99

        assert view.filter_counts[FilterKey.ALL] == 2
        assert view == FleetView(filter_counts={FilterKey.ALL: 2, FilterKey.MOVING: 1})
        with pytest.raises(TypeError):
            FleetView().filter_counts[FilterKey.ALL] = 1  # type: ignore[index]

    def test_dump_uses_camel_case(self, make_vehicle: Callable[..., Vehicle]) -> None:
        vehicle = make_vehicle()
        view = FleetView(
            visible_vehicles=(vehicle,),
            selected=vehicle,
            trail=(vehicle.position,),
            filter_counts={FilterKey.ALL: 1},
        )

        dumped = view.model_dump(by_alias=True, mode="json")

        assert dumped["visibleVehicles"][0]["currentSpeed"] == 50
        assert dumped["visibleVehicles"][0]["model"] == "Sprinter 415"
        assert dumped["filterCounts"] == {"all": 1}
        assert dumped["trail"] == [{"latitude": -23.55, "longitude": -46.63}]
        assert dumped["followPosition"] is None
