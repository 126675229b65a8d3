"""View model composition.

Assembles a :class:`~fleetview.models.view.FleetView` from the live
components. Every value is read from its owner at composition time: the
selected record comes from the snapshot store and badge counts come from
the ledger, so a view is never older than the last applied event.
"""

from __future__ import annotations

from fleetview.models.view import FleetView
from fleetview.state.ledger import AlertLedger
from fleetview.state.projector import FilterProjector, filter_counts
from fleetview.state.selection import SelectionMachine
from fleetview.state.store import FleetSnapshotStore
from fleetview.state.trail import TrailAccumulator


class ViewComposer:
    def __init__(
        self,
        *,
        store: FleetSnapshotStore,
        ledger: AlertLedger,
        trail: TrailAccumulator,
        selection: SelectionMachine,
        projector: FilterProjector,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._trail = trail
        self._selection = selection
        self._projector = projector

    def compose(self) -> FleetView:
        vehicles = self._store.vehicles()
        selected = self._store.get(self._selection.selected_vehicle_id)
        following = selected is not None and self._selection.is_following

        if selected is not None:
            alerts_for_selected = tuple(self._ledger.list_for(selected.id))
            unread_by_selected = self._ledger.unread_count_for(selected.id)
        else:
            alerts_for_selected = ()
            unread_by_selected = 0

        return FleetView(
            visible_vehicles=self._projector.apply(vehicles),
            selected=selected,
            is_following=following,
            trail=self._trail.current() if selected is not None else (),
            alerts_for_selected=alerts_for_selected,
            unread_total=self._ledger.unread_total(),
            unread_by_selected=unread_by_selected,
            query=self._projector.query,
            filter_key=self._projector.filter_key,
            filter_counts=filter_counts(vehicles),
            follow_position=selected.position if following and selected is not None else None,
            total_vehicles=len(vehicles),
        )
