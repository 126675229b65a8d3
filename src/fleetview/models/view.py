"""Render-ready view model handed to the presentation layer."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import Field, field_serializer, field_validator

from fleetview.models._base import FleetBaseModel
from fleetview.models.alert import Alert
from fleetview.models.vehicle import TrailPoint, Vehicle


class FilterKey(enum.StrEnum):
    """Vehicle list filter chips."""

    ALL = "all"
    MOVING = "moving"
    STOPPED = "stopped"
    ALERTS = "alerts"
    OFFLINE = "offline"


class FleetView(FleetBaseModel):
    """Immutable snapshot of everything the renderer draws in one refresh.

    Serializes to the camelCase wire shape with
    ``view.model_dump(by_alias=True)``.
    """

    visible_vehicles: tuple[Vehicle, ...] = ()
    """Vehicles passing the current query and filter, in snapshot order."""
    selected: Vehicle | None = None
    """Latest snapshot record of the selected vehicle."""
    is_following: bool = False
    trail: tuple[TrailPoint, ...] = ()
    """Recent positions of the selected vehicle, oldest first."""
    alerts_for_selected: tuple[Alert, ...] = ()
    """Alerts of the selected vehicle, newest first."""
    unread_total: int = 0
    unread_by_selected: int = 0
    query: str = ""
    filter_key: FilterKey = FilterKey.ALL
    filter_counts: Mapping[FilterKey, int] = Field(default_factory=dict, validate_default=True)
    """Per-chip vehicle counts (filter predicate only, query ignored). Read-only."""
    follow_position: TrailPoint | None = None
    """Where the map should center while following, else ``None``."""
    total_vehicles: int = 0

    @field_validator("filter_counts")
    @classmethod
    def _freeze_counts(cls, value: Mapping[FilterKey, int]) -> Mapping[FilterKey, int]:
        return MappingProxyType(dict(value))

    @field_serializer("filter_counts")
    def _dump_counts(self, value: Mapping[FilterKey, int]) -> dict[FilterKey, int]:
        return dict(value)
