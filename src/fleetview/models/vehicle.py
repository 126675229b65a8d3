"""Vehicle snapshot model.

A :class:`Vehicle` is always a *complete* record: the feed delivers whole
records and the snapshot store replaces them wholesale.
"""

from __future__ import annotations

import enum
import math
from typing import Any

from pydantic import Field, field_validator

from fleetview.models._base import FleetBaseModel, FleetTimestamp

# ------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------


class VehicleStatus(enum.StrEnum):
    """Operational status reported by the feed."""

    MOVING = "moving"
    STOPPED = "stopped"
    IDLE = "idle"
    OFFLINE = "offline"


class Ignition(enum.StrEnum):
    """Ignition switch state."""

    ON = "on"
    OFF = "off"


# ------------------------------------------------------------------
# Models
# ------------------------------------------------------------------


class TrailPoint(FleetBaseModel):
    """A WGS84 position sample."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Vehicle(FleetBaseModel):
    """Current state of one fleet vehicle."""

    id: str = Field(min_length=1)
    """Stable vehicle identifier."""
    name: str
    """Display name."""
    license_plate: str
    """License plate."""
    vehicle_model: str | None = Field(default=None, alias="model")
    """Free-text make/model, e.g. ``"Sprinter 415"``."""
    status: VehicleStatus
    ignition: Ignition
    current_speed: float = Field(ge=0.0)
    """Current speed in km/h."""
    speed_limit: float = Field(ge=0.0)
    """Configured speed limit in km/h."""
    heading: float
    """Heading in degrees, normalized into ``[0, 360)``."""
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    accuracy: float = Field(ge=0.0)
    """Position accuracy in meters."""
    last_update: FleetTimestamp
    """When the device last reported."""
    battery_level: float | None = Field(default=None, ge=0.0, le=100.0)
    """Battery charge percentage, if the device reports one."""

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("id must be non-empty")
        return vehicle_id

    @field_validator("heading", mode="before")
    @classmethod
    def _normalize_heading(cls, value: Any) -> float:
        try:
            heading = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"heading must be a number, got {value!r}") from exc
        if not math.isfinite(heading):
            raise ValueError("heading must be a finite number of degrees")
        return heading % 360.0

    @property
    def position(self) -> TrailPoint:
        return TrailPoint(latitude=self.latitude, longitude=self.longitude)

    @property
    def is_speeding(self) -> bool:
        """Whether the vehicle is above its speed limit."""
        return self.current_speed > self.speed_limit

    @property
    def is_stopped(self) -> bool:
        """Stopped and idle vehicles are grouped together in the list."""
        return self.status in (VehicleStatus.STOPPED, VehicleStatus.IDLE)
