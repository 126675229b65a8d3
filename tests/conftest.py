from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from fleetview.models.alert import Alert
from fleetview.models.vehicle import Vehicle

_BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def vehicle_payload(vehicle_id: str = "v1", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": vehicle_id,
        "name": f"Truck {vehicle_id}",
        "licensePlate": f"ABC-{vehicle_id.upper()}",
        "model": "Sprinter 415",
        "status": "moving",
        "ignition": "on",
        "currentSpeed": 50,
        "speedLimit": 80,
        "heading": 90,
        "latitude": -23.55,
        "longitude": -46.63,
        "accuracy": 5,
        "lastUpdate": "2026-01-01T12:00:00Z",
        "batteryLevel": 87,
    }
    payload.update(overrides)
    return payload


def alert_payload(alert_id: str = "a1", vehicle_id: str = "v1", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": alert_id,
        "vehicleId": vehicle_id,
        "type": "speed",
        "priority": "critical",
        "message": "Speeding: 95 km/h",
        "timestamp": "2026-01-01T12:00:00Z",
        "read": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_vehicle() -> Callable[..., Vehicle]:
    def _make(vehicle_id: str = "v1", **overrides: Any) -> Vehicle:
        return Vehicle.model_validate(vehicle_payload(vehicle_id, **overrides))

    return _make


@pytest.fixture
def make_alert() -> Callable[..., Alert]:
    def _make(alert_id: str = "a1", vehicle_id: str = "v1", *, minutes: int = 0, **overrides: Any) -> Alert:
        overrides.setdefault("timestamp", (_BASE_TIME + timedelta(minutes=minutes)).isoformat())
        return Alert.model_validate(alert_payload(alert_id, vehicle_id, **overrides))

    return _make


@pytest.fixture
def vehicle_data() -> Callable[..., dict[str, Any]]:
    return vehicle_payload


@pytest.fixture
def alert_data() -> Callable[..., dict[str, Any]]:
    return alert_payload
