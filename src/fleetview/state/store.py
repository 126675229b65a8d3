"""Fleet snapshot store.

This is the only component that owns vehicle records. It applies whole-record
replacements in arrival order and never rejects an update for being stale:
if two updates for the same id arrive, the later-arriving one wins even when
its ``last_update`` is older.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from fleetview.models.vehicle import Vehicle
from fleetview.state.signals import Signal


@dataclass(frozen=True, slots=True)
class SnapshotChange:
    """One applied mutation.

    ``current`` is ``None`` when the record was removed; ``previous`` is
    ``None`` when the id was not in the snapshot before.
    """

    vehicle_id: str
    previous: Vehicle | None
    current: Vehicle | None

    @property
    def removed(self) -> bool:
        return self.current is None

    @property
    def moved(self) -> bool:
        """Whether the vehicle's position differs from the previous record."""
        if self.previous is None or self.current is None:
            return False
        return self.previous.position != self.current.position


class FleetSnapshotStore:
    """In-memory mapping of vehicle id to the latest vehicle record.

    Iteration order is insertion order: a replaced record keeps its slot,
    a removed-then-re-added vehicle moves to the end.
    """

    def __init__(self) -> None:
        self._vehicles: dict[str, Vehicle] = {}
        self.changed: Signal[SnapshotChange] = Signal()

    def apply_update(self, vehicle: Vehicle) -> None:
        """Replace the full record for ``vehicle.id``."""
        previous = self._vehicles.get(vehicle.id)
        self._vehicles[vehicle.id] = vehicle
        self.changed.emit(SnapshotChange(vehicle_id=vehicle.id, previous=previous, current=vehicle))

    def remove(self, vehicle_id: str) -> bool:
        """Delete a record. Returns ``False`` (and does nothing) for an unknown id."""
        previous = self._vehicles.pop(vehicle_id, None)
        if previous is None:
            return False
        self.changed.emit(SnapshotChange(vehicle_id=vehicle_id, previous=previous, current=None))
        return True

    def get(self, vehicle_id: str | None) -> Vehicle | None:
        if vehicle_id is None:
            return None
        return self._vehicles.get(vehicle_id)

    def get_all(self) -> Mapping[str, Vehicle]:
        """Return a copy of the current mapping, in insertion order."""
        return dict(self._vehicles)

    def vehicles(self) -> tuple[Vehicle, ...]:
        return tuple(self._vehicles.values())

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._vehicles

    def __iter__(self) -> Iterator[Vehicle]:
        return iter(tuple(self._vehicles.values()))

    def __len__(self) -> int:
        return len(self._vehicles)
