"""Internal live-feed coordination for FleetLiveClient.

Owns:
- starting/stopping the threaded MQTT runtime
- translating feed messages into engine events, in arrival order
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from fleetview._mqtt import FeedMessage, FeedMqttRuntime
from fleetview._redact import redact_for_log
from fleetview.config import FleetViewConfig
from fleetview.exceptions import FleetViewPayloadError
from fleetview.ingestion.mqtt import build_event_from_message
from fleetview.state.events import FeedEvent

RuntimeFactory = Callable[..., FeedMqttRuntime]


class FeedCoordinator:
    def __init__(
        self,
        *,
        config: FleetViewConfig,
        loop: asyncio.AbstractEventLoop,
        store_apply: Callable[[FeedEvent], None],
        logger: logging.Logger,
        runtime_factory: RuntimeFactory = FeedMqttRuntime,
    ) -> None:
        self._config = config
        self._loop = loop
        self._store_apply = store_apply
        self._logger = logger
        self._runtime_factory = runtime_factory
        self._runtime: FeedMqttRuntime | None = None
        self.applied_count = 0
        self.rejected_count = 0

    @property
    def runtime(self) -> FeedMqttRuntime | None:
        return self._runtime

    @property
    def is_running(self) -> bool:
        return self._runtime is not None and self._runtime.is_running

    async def ensure_started(self) -> None:
        if not self._config.mqtt_enabled:
            return

        try:
            runtime = self._runtime_factory(
                loop=self._loop,
                on_message=self.on_message,
                keepalive=self._config.mqtt_keepalive,
                logger=self._logger,
            )
            previous = self._runtime
            await self._loop.run_in_executor(None, runtime.start, self._config)
            self._runtime = runtime
            if previous is not None:
                await self._loop.run_in_executor(None, previous.stop)
        except Exception:
            self._logger.warning("MQTT feed start failed; continuing without live updates", exc_info=True)

    async def stop(self) -> None:
        """Stop the feed. The engine keeps its last-known state."""
        runtime = self._runtime
        self._runtime = None
        if runtime is None:
            return
        try:
            await self._loop.run_in_executor(None, runtime.stop)
        except Exception:
            self._logger.debug("MQTT runtime stop failed", exc_info=True)

    def on_message(self, message: FeedMessage) -> None:
        try:
            event = build_event_from_message(message, self._config.topics)
        except FleetViewPayloadError as exc:
            self.rejected_count += 1
            self._logger.debug(
                "Rejected feed message topic=%s: %s payload=%s",
                message.topic,
                exc,
                redact_for_log(message.payload),
            )
            return

        self._store_apply(event)
        self.applied_count += 1
