"""Engine and adapter configuration for fleetview."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fleetview._constants import (
    DEFAULT_ALERT_REFRESH_INTERVAL,
    DEFAULT_ALERT_TOPIC,
    DEFAULT_ALERTS_PATH,
    DEFAULT_DELETE_TOPIC,
    DEFAULT_VEHICLE_TOPIC,
    DEFAULT_VEHICLES_PATH,
    TRAIL_CAPACITY,
)
from fleetview.exceptions import FleetViewConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise FleetViewConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FeedTopics:
    """MQTT topics the live feed subscribes to.

    A message's topic decides which event it carries; messages on any
    other topic must name their event type in the envelope.
    """

    vehicles: str = DEFAULT_VEHICLE_TOPIC
    deletions: str = DEFAULT_DELETE_TOPIC
    alerts: str = DEFAULT_ALERT_TOPIC

    def all(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(topic for topic in (self.vehicles, self.deletions, self.alerts) if topic))


@dataclasses.dataclass(frozen=True)
class FleetViewConfig:
    """Client configuration.

    Parameters
    ----------
    api_base_url : str
        Base URL of the fleet REST API used for the initial snapshot.
    vehicles_path : str
        Collection endpoint returning the full vehicle list.
    alerts_path : str
        Collection endpoint returning the alert list.
    alert_refresh_interval : float
        Seconds between background alert re-fetches. ``0`` disables
        the refresh loop.
    trail_capacity : int
        Number of positions kept in the selected vehicle's trail.
    http_timeout : float
        Total timeout for a single HTTP request in seconds.
    mqtt_enabled : bool
        Enable the MQTT live feed.
    mqtt_host : str
        Broker host name.
    mqtt_port : int
        Broker port.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_username : str or None
        Broker user name, if the broker requires authentication.
    mqtt_password : str or None
        Broker password.
    mqtt_tls : bool
        Wrap the broker connection in TLS.
    mqtt_client_id : str
        Client identifier; empty lets the broker assign one.
    topics : FeedTopics
        Topics carrying vehicle updates, deletions and alerts.
    """

    api_base_url: str = "http://localhost:5000"
    vehicles_path: str = DEFAULT_VEHICLES_PATH
    alerts_path: str = DEFAULT_ALERTS_PATH
    alert_refresh_interval: float = DEFAULT_ALERT_REFRESH_INTERVAL
    trail_capacity: int = TRAIL_CAPACITY
    http_timeout: float = 15.0
    mqtt_enabled: bool = True
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_keepalive: int = 60
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_tls: bool = False
    mqtt_client_id: str = ""
    topics: FeedTopics = dataclasses.field(default_factory=FeedTopics)

    def __post_init__(self) -> None:
        if self.trail_capacity < 1:
            raise FleetViewConfigError(f"trail_capacity must be at least 1, got {self.trail_capacity}")
        if self.alert_refresh_interval < 0:
            raise FleetViewConfigError(
                f"alert_refresh_interval must not be negative, got {self.alert_refresh_interval}"
            )
        if not 0 < self.mqtt_port < 65536:
            raise FleetViewConfigError(f"mqtt_port out of range: {self.mqtt_port}")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetViewConfig:
        """Create configuration from ``FLEETVIEW_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        FleetViewConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ

        topic_kwargs: dict[str, str] = {}
        _ENV_TOPIC_MAP = {
            "FLEETVIEW_TOPIC_VEHICLES": "vehicles",
            "FLEETVIEW_TOPIC_DELETIONS": "deletions",
            "FLEETVIEW_TOPIC_ALERTS": "alerts",
        }
        for env_key, field_name in _ENV_TOPIC_MAP.items():
            val = env.get(env_key)
            if val is not None:
                topic_kwargs[field_name] = val

        topic_overrides = overrides.pop("topics", None)
        if isinstance(topic_overrides, dict):
            topic_kwargs.update(topic_overrides)
        elif isinstance(topic_overrides, FeedTopics):
            topic_kwargs = dataclasses.asdict(topic_overrides)

        config_kwargs: dict[str, Any] = {"topics": FeedTopics(**topic_kwargs)}

        _ENV_STR_MAP = {
            "FLEETVIEW_API_BASE_URL": "api_base_url",
            "FLEETVIEW_VEHICLES_PATH": "vehicles_path",
            "FLEETVIEW_ALERTS_PATH": "alerts_path",
            "FLEETVIEW_MQTT_HOST": "mqtt_host",
            "FLEETVIEW_MQTT_USERNAME": "mqtt_username",
            "FLEETVIEW_MQTT_PASSWORD": "mqtt_password",
            "FLEETVIEW_MQTT_CLIENT_ID": "mqtt_client_id",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMBER_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "FLEETVIEW_ALERT_REFRESH_INTERVAL": ("alert_refresh_interval", float),
            "FLEETVIEW_TRAIL_CAPACITY": ("trail_capacity", int),
            "FLEETVIEW_HTTP_TIMEOUT": ("http_timeout", float),
            "FLEETVIEW_MQTT_PORT": ("mqtt_port", int),
            "FLEETVIEW_MQTT_KEEPALIVE": ("mqtt_keepalive", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        if "mqtt_enabled" not in overrides:
            config_kwargs["mqtt_enabled"] = _env_bool(env.get("FLEETVIEW_MQTT_ENABLED"), True)
        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("FLEETVIEW_MQTT_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
