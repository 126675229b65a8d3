"""High-level async client wiring the fleet API and live feed into an engine."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

import aiohttp

from fleetview._client.feed import FeedCoordinator, RuntimeFactory
from fleetview._mqtt import FeedMqttRuntime
from fleetview._transport import HttpTransport, Transport
from fleetview.config import FleetViewConfig
from fleetview.engine import FleetEngine
from fleetview.exceptions import FleetViewError, FleetViewTransportError
from fleetview.ingestion.http import fetch_alerts, load_snapshot

_logger = logging.getLogger(__name__)


class FleetLiveClient:
    """Keeps a :class:`FleetEngine` in sync with the fleet backend.

    Usage::

        async with FleetLiveClient(FleetViewConfig.from_env()) as client:
            client.engine.subscribe(render)
            await client.start()
            ...

    Closing the client stops the feed and the alert refresh but leaves the
    engine's snapshot untouched; starting again re-applies fresh data over it.
    """

    def __init__(
        self,
        config: FleetViewConfig | None = None,
        *,
        engine: FleetEngine | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        runtime_factory: RuntimeFactory = FeedMqttRuntime,
    ) -> None:
        self._config = config if config is not None else FleetViewConfig()
        self._engine = engine if engine is not None else FleetEngine(trail_capacity=self._config.trail_capacity)
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._runtime_factory = runtime_factory
        self._loop: asyncio.AbstractEventLoop | None = None
        self._feed: FeedCoordinator | None = None
        self._refresh_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetLiveClient:
        self._loop = asyncio.get_running_loop()
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._loop = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> FleetViewConfig:
        return self._config

    @property
    def engine(self) -> FleetEngine:
        return self._engine

    @property
    def feed(self) -> FeedCoordinator | None:
        return self._feed

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FleetViewError("Client not initialized. Use 'async with FleetLiveClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load the REST snapshot, then start the live feed and alert refresh."""
        await self.refresh()

        loop = self._loop or asyncio.get_running_loop()
        if self._config.mqtt_enabled and self._feed is None:
            self._feed = FeedCoordinator(
                config=self._config,
                loop=loop,
                store_apply=self._engine.apply,
                logger=_logger,
                runtime_factory=self._runtime_factory,
            )
        if self._feed is not None:
            await self._feed.ensure_started()

        if self._config.alert_refresh_interval > 0 and self._refresh_task is None:
            self._refresh_task = loop.create_task(self._alert_refresh_loop())

    async def refresh(self) -> tuple[int, int]:
        """Re-fetch vehicles and alerts and apply them over the current snapshot."""
        vehicles, alerts = await load_snapshot(
            self._engine.apply,
            config=self._config,
            transport=self._require_transport(),
        )
        _logger.debug("Snapshot loaded vehicles=%d alerts=%d", vehicles, alerts)
        return vehicles, alerts

    async def refresh_alerts(self) -> int:
        """Re-fetch the alert list; returns the number of alerts applied."""
        events = await fetch_alerts(self._config, self._require_transport())
        return self._engine.apply_all(events)

    async def _alert_refresh_loop(self) -> None:
        interval = self._config.alert_refresh_interval
        while True:
            await asyncio.sleep(interval)
            try:
                await self.refresh_alerts()
            except FleetViewTransportError:
                _logger.debug("Alert refresh failed; retrying next interval", exc_info=True)

    async def close(self) -> None:
        """Stop the live feed and refresh loop. The engine state is kept."""
        task = self._refresh_task
        self._refresh_task = None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self._feed is not None:
            await self._feed.stop()
