"""Normalized feed events.

All ingestion paths (HTTP bootstrap, MQTT feed) convert their inputs into
these events. Only the engine is allowed to apply them to the state layer.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetview.models.alert import Alert
from fleetview.models.vehicle import Vehicle


class FeedSource(StrEnum):
    HTTP = "http"
    MQTT = "mqtt"
    LOCAL = "local"


class FeedEventKind(StrEnum):
    VEHICLE_UPDATE = "vehicle_update"
    VEHICLE_DELETE = "vehicle_delete"
    ALERT = "alert"


class _FeedEventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: FeedSource = FeedSource.LOCAL
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class VehicleUpdated(_FeedEventBase):
    """A complete vehicle record replacing whatever the snapshot holds for its id."""

    kind: Literal[FeedEventKind.VEHICLE_UPDATE] = FeedEventKind.VEHICLE_UPDATE
    vehicle: Vehicle


class VehicleDeleted(_FeedEventBase):
    """Explicit removal of a vehicle from the live snapshot."""

    kind: Literal[FeedEventKind.VEHICLE_DELETE] = FeedEventKind.VEHICLE_DELETE
    vehicle_id: str = Field(..., min_length=1)

    @field_validator("vehicle_id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id


class AlertRaised(_FeedEventBase):
    """A classified alert delivered (or re-delivered) by upstream."""

    kind: Literal[FeedEventKind.ALERT] = FeedEventKind.ALERT
    alert: Alert


FeedEvent = Annotated[VehicleUpdated | VehicleDeleted | AlertRaised, Field(discriminator="kind")]
