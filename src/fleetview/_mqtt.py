"""Internal MQTT runtime for the live fleet feed."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from fleetview._redact import redact_for_log
from fleetview.config import FleetViewConfig
from fleetview.exceptions import FleetViewPayloadError


@dataclass(frozen=True)
class FeedMessage:
    """A decoded feed message and the topic it arrived on."""

    topic: str
    payload: dict[str, Any]


def decode_feed_payload(payload: bytes) -> dict[str, Any]:
    """Decode MQTT payload bytes into a JSON object."""
    try:
        parsed = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FleetViewPayloadError(f"Feed payload is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise FleetViewPayloadError("Feed payload decoded to non-object JSON")
    return parsed


class FeedMqttRuntime:
    """Threaded paho-mqtt runtime that emits decoded messages onto an asyncio loop.

    Reconnection after a dropped connection is handled by paho's network
    loop; subscriptions are renewed on every successful connect.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_message: Callable[[FeedMessage], None],
        keepalive: int = 60,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_message = on_message
        self._keepalive = keepalive
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._topics: tuple[str, ...] = ()

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    def handle_payload(self, topic: str, payload: bytes) -> None:
        """Decode one raw message and hand it to the loop thread.

        Undecodable payloads are logged and dropped.
        """
        try:
            parsed = decode_feed_payload(payload)
        except FleetViewPayloadError:
            self._logger.debug("MQTT payload decode failure topic=%s", topic, exc_info=True)
            return
        self._logger.debug("Received PUBLISH topic=%s parsed=%s", topic, redact_for_log(parsed))
        self._loop.call_soon_threadsafe(self._on_message, FeedMessage(topic=topic, payload=parsed))

    def start(self, config: FleetViewConfig) -> None:
        """Connect and subscribe to the configured feed topics."""
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s topics=%s",
            config.mqtt_host,
            config.mqtt_port,
            config.topics.all(),
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=config.mqtt_client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        if config.mqtt_username:
            client.username_pw_set(config.mqtt_username, config.mqtt_password)
        if config.mqtt_tls:
            client.tls_set()
        client.reconnect_delay_set(min_delay=1, max_delay=30)

        self._topics = config.topics.all()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)
            if self._topics:
                self._logger.debug("MQTT subscribing topics=%s", self._topics)
                c.subscribe([(topic, 0) for topic in self._topics])

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self.handle_payload(msg.topic, msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(config.mqtt_host, config.mqtt_port, keepalive=self._keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._topics = ()

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
