"""Alert event model.

Alerts are classified upstream; the core only stores them and tracks the
read flag. ``vehicle_id`` is a weak reference: the vehicle may already be
gone from the snapshot.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field, field_validator

from fleetview.models._base import FleetBaseModel, FleetTimestamp

# ------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------


class AlertCategory(enum.StrEnum):
    """Coarse grouping used for alert iconography."""

    SPEED = "speed"
    GEOFENCE = "geofence"
    OTHER = "other"


class AlertType(enum.StrEnum):
    """Alert classification.

    Upstream may introduce new types before this library knows about them;
    values without a mapped member resolve to ``UNKNOWN`` instead of
    rejecting the alert.
    """

    SPEED = "speed"
    GEOFENCE_ENTRY = "geofence_entry"
    GEOFENCE_EXIT = "geofence_exit"
    GEOFENCE_DWELL = "geofence_dwell"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> AlertType:
        return cls.UNKNOWN

    @property
    def category(self) -> AlertCategory:
        if self is AlertType.SPEED:
            return AlertCategory.SPEED
        if self in (AlertType.GEOFENCE_ENTRY, AlertType.GEOFENCE_EXIT, AlertType.GEOFENCE_DWELL):
            return AlertCategory.GEOFENCE
        return AlertCategory.OTHER


class AlertPriority(enum.StrEnum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


# ------------------------------------------------------------------
# Model
# ------------------------------------------------------------------


class Alert(FleetBaseModel):
    """A safety alert correlated to a vehicle by id."""

    id: str = Field(min_length=1)
    vehicle_id: str = Field(min_length=1)
    type: AlertType
    priority: AlertPriority
    message: str
    timestamp: FleetTimestamp
    read: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> AlertType:
        return value if isinstance(value, AlertType) else AlertType(value)

    @property
    def category(self) -> AlertCategory:
        return self.type.category
