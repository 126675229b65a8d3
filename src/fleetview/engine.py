"""Live fleet view-state engine.

:class:`FleetEngine` is the composition root of the state layer. It owns
(or is handed) the snapshot store, alert ledger, trail accumulator,
selection machine and filter projector, wires their change signals
together, and publishes a freshly composed :class:`FleetView` after every
feed event or user action that changed something.

All operations are synchronous and run to completion; events are applied
strictly in the order they are passed in.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import UTC, datetime
from typing import Any, assert_never

from fleetview._constants import TRAIL_CAPACITY
from fleetview.models.alert import Alert
from fleetview.models.vehicle import Vehicle
from fleetview.models.view import FilterKey, FleetView
from fleetview.state.composer import ViewComposer
from fleetview.state.events import AlertRaised, FeedEvent, VehicleDeleted, VehicleUpdated
from fleetview.state.ledger import AlertLedger
from fleetview.state.projector import FilterProjector
from fleetview.state.selection import SelectionMachine
from fleetview.state.signals import Signal
from fleetview.state.store import FleetSnapshotStore, SnapshotChange
from fleetview.state.trail import TrailAccumulator

_logger = logging.getLogger(__name__)


class FleetEngine:
    """Reducer over feed events and user actions.

    Usage::

        engine = FleetEngine()
        engine.subscribe(render)
        engine.apply(VehicleUpdated(vehicle=vehicle))
        engine.select_vehicle(vehicle.id)
    """

    def __init__(
        self,
        *,
        trail_capacity: int = TRAIL_CAPACITY,
        store: FleetSnapshotStore | None = None,
        ledger: AlertLedger | None = None,
        trail: TrailAccumulator | None = None,
        selection: SelectionMachine | None = None,
        projector: FilterProjector | None = None,
    ) -> None:
        self._store = store if store is not None else FleetSnapshotStore()
        self._ledger = ledger if ledger is not None else AlertLedger()
        self._trail = trail if trail is not None else TrailAccumulator(trail_capacity)
        self._selection = selection if selection is not None else SelectionMachine()
        self._projector = projector if projector is not None else FilterProjector()
        self._composer = ViewComposer(
            store=self._store,
            ledger=self._ledger,
            trail=self._trail,
            selection=self._selection,
            projector=self._projector,
        )
        self._views: Signal[FleetView] = Signal()
        self._depth = 0
        self._dirty = False

        self._store.changed.connect(self._on_snapshot_changed)
        self._ledger.changed.connect(self._mark_dirty)
        self._trail.changed.connect(self._mark_dirty)
        self._selection.changed.connect(self._mark_dirty)
        self._projector.changed.connect(self._mark_dirty)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def store(self) -> FleetSnapshotStore:
        return self._store

    @property
    def ledger(self) -> AlertLedger:
        return self._ledger

    @property
    def trail(self) -> TrailAccumulator:
        return self._trail

    @property
    def selection(self) -> SelectionMachine:
        return self._selection

    @property
    def projector(self) -> FilterProjector:
        return self._projector

    # ------------------------------------------------------------------
    # Feed events
    # ------------------------------------------------------------------

    def apply(self, event: FeedEvent) -> None:
        """Apply one normalized feed event."""
        if _logger.isEnabledFor(logging.DEBUG):
            lag = (datetime.now(UTC) - event.observed_at).total_seconds()
            _logger.debug("Applying %s from %s lag=%.3fs", event.kind, event.source, lag)
        with self._mutation():
            match event:
                case VehicleUpdated():
                    self._store.apply_update(event.vehicle)
                case VehicleDeleted():
                    if not self._store.remove(event.vehicle_id):
                        _logger.debug("Delete ignored for unknown vehicle %s", event.vehicle_id)
                case AlertRaised():
                    self._ledger.ingest(event.alert)
                case _:
                    assert_never(event)

    def apply_all(self, events: Iterable[FeedEvent]) -> int:
        """Apply events one by one in iteration order. Returns how many were applied."""
        count = 0
        for event in events:
            self.apply(event)
            count += 1
        return count

    def apply_vehicle_update(self, vehicle: Vehicle) -> None:
        self.apply(VehicleUpdated(vehicle=vehicle))

    def remove_vehicle(self, vehicle_id: str) -> None:
        self.apply(VehicleDeleted(vehicle_id=vehicle_id))

    def ingest_alert(self, alert: Alert) -> None:
        self.apply(AlertRaised(alert=alert))

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def select_vehicle(self, vehicle_id: str) -> bool:
        """Select a vehicle and restart its trail at the current position.

        Returns ``False`` without changing anything when the id is not in
        the snapshot.
        """
        vehicle = self._store.get(vehicle_id)
        if vehicle is None:
            _logger.debug("Selection ignored for unknown vehicle %s", vehicle_id)
            return False
        with self._mutation():
            self._selection.select(vehicle.id)
            self._trail.reset(vehicle.position)
        return True

    def close_detail(self) -> None:
        with self._mutation():
            self._selection.close()
            if len(self._trail):
                self._trail.clear()

    def toggle_follow(self) -> bool:
        """Toggle follow mode; returns whether the view is now following."""
        with self._mutation():
            return self._selection.toggle_follow()

    def mark_alert_read(self, alert_id: str) -> bool:
        with self._mutation():
            return self._ledger.mark_read(alert_id)

    def set_query(self, text: str) -> None:
        with self._mutation():
            self._projector.set_query(text)

    def set_filter(self, key: FilterKey | str) -> None:
        with self._mutation():
            self._projector.set_filter(key)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def view(self) -> FleetView:
        """Compose the current view model."""
        return self._composer.compose()

    def vehicle_for_alert(self, alert_id: str) -> Vehicle | None:
        """Resolve an alert's vehicle; ``None`` if either is unknown."""
        alert = self._ledger.get(alert_id)
        if alert is None:
            return None
        return self._store.get(alert.vehicle_id)

    def subscribe(self, callback: Callable[[FleetView], None]) -> Callable[[], None]:
        """Receive a new view after every state change. Returns an unsubscribe function."""
        return self._views.connect(callback)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextlib.contextmanager
    def _mutation(self) -> Iterator[None]:
        # Nested changes publish once, after the outermost mutation completes.
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0 and self._dirty:
                self._dirty = False
                self._publish()

    def _mark_dirty(self, _payload: Any = None) -> None:
        self._dirty = True
        if self._depth == 0:
            self._dirty = False
            self._publish()

    def _publish(self) -> None:
        if not len(self._views):
            return
        self._views.emit(self._composer.compose())

    def _on_snapshot_changed(self, change: SnapshotChange) -> None:
        with self._mutation():
            self._dirty = True
            if change.vehicle_id != self._selection.selected_vehicle_id:
                return
            if change.removed:
                self._selection.close()
                self._trail.clear()
            elif change.moved and change.current is not None:
                self._trail.push(change.current.position)
