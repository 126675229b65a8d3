"""Internal constants shared across the library."""

#: Maximum number of samples kept in the selected vehicle's trail.
TRAIL_CAPACITY = 20

USER_AGENT = "fleetview/0.1"

DEFAULT_VEHICLES_PATH = "/api/vehicles"
DEFAULT_ALERTS_PATH = "/api/alerts"

#: The dashboard re-fetches the alert list on this cadence (seconds).
DEFAULT_ALERT_REFRESH_INTERVAL = 10.0

DEFAULT_VEHICLE_TOPIC = "fleet/vehicles"
DEFAULT_DELETE_TOPIC = "fleet/vehicles/deleted"
DEFAULT_ALERT_TOPIC = "fleet/alerts"
