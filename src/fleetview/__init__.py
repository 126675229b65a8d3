"""fleetview - Live fleet synchronization and view-state engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetview")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetview.client import FleetLiveClient
from fleetview.config import FeedTopics, FleetViewConfig
from fleetview.engine import FleetEngine
from fleetview.exceptions import (
    FleetViewConfigError,
    FleetViewError,
    FleetViewPayloadError,
    FleetViewTransportError,
)
from fleetview.models import (
    Alert,
    AlertCategory,
    AlertPriority,
    AlertType,
    FilterKey,
    FleetView,
    Ignition,
    TrailPoint,
    Vehicle,
    VehicleStatus,
    format_age,
)
from fleetview.state.events import (
    AlertRaised,
    FeedEvent,
    FeedEventKind,
    FeedSource,
    VehicleDeleted,
    VehicleUpdated,
)
from fleetview.state.projector import filter_counts, project
from fleetview.state.selection import SelectionPhase

__all__ = [
    "__version__",
    "Alert",
    "AlertCategory",
    "AlertPriority",
    "AlertRaised",
    "AlertType",
    "FeedEvent",
    "FeedEventKind",
    "FeedSource",
    "FeedTopics",
    "FilterKey",
    "FleetEngine",
    "FleetLiveClient",
    "FleetView",
    "FleetViewConfig",
    "FleetViewConfigError",
    "FleetViewError",
    "FleetViewPayloadError",
    "FleetViewTransportError",
    "Ignition",
    "SelectionPhase",
    "TrailPoint",
    "Vehicle",
    "VehicleDeleted",
    "VehicleStatus",
    "VehicleUpdated",
    "filter_counts",
    "format_age",
    "project",
]
