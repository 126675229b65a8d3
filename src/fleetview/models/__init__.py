"""Data models for fleet feed payloads and the view model."""

from fleetview.models._base import FleetBaseModel, FleetTimestamp, format_age, parse_timestamp
from fleetview.models.alert import Alert, AlertCategory, AlertPriority, AlertType
from fleetview.models.vehicle import Ignition, TrailPoint, Vehicle, VehicleStatus
from fleetview.models.view import FilterKey, FleetView

__all__ = [
    "Alert",
    "AlertCategory",
    "AlertPriority",
    "AlertType",
    "FilterKey",
    "FleetBaseModel",
    "FleetTimestamp",
    "FleetView",
    "Ignition",
    "TrailPoint",
    "Vehicle",
    "VehicleStatus",
    "format_age",
    "parse_timestamp",
]
