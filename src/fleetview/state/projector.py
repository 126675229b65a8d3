"""Filter/search projection of the snapshot.

:func:`project` is a pure function of its arguments. :class:`FilterProjector`
only remembers the last query and filter key the caller supplied.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import assert_never

from fleetview.models.vehicle import Vehicle, VehicleStatus
from fleetview.models.view import FilterKey
from fleetview.state.signals import Signal


def matches_query(vehicle: Vehicle, query: str) -> bool:
    """Case-insensitive substring match on name or license plate."""
    if not query:
        return True
    needle = query.casefold()
    return needle in vehicle.name.casefold() or needle in vehicle.license_plate.casefold()


def matches_filter(vehicle: Vehicle, filter_key: FilterKey) -> bool:
    match filter_key:
        case FilterKey.ALL:
            return True
        case FilterKey.MOVING:
            return vehicle.status == VehicleStatus.MOVING
        case FilterKey.STOPPED:
            return vehicle.is_stopped
        case FilterKey.ALERTS:
            return vehicle.is_speeding
        case FilterKey.OFFLINE:
            return vehicle.status == VehicleStatus.OFFLINE
        case _:
            assert_never(filter_key)


def project(vehicles: Iterable[Vehicle], query: str, filter_key: FilterKey) -> tuple[Vehicle, ...]:
    """Vehicles matching both *query* and *filter_key*, in input order."""
    return tuple(
        vehicle for vehicle in vehicles if matches_filter(vehicle, filter_key) and matches_query(vehicle, query)
    )


def filter_counts(vehicles: Iterable[Vehicle]) -> dict[FilterKey, int]:
    """Number of vehicles each filter chip would show, ignoring the query."""
    counts = dict.fromkeys(FilterKey, 0)
    for vehicle in vehicles:
        for key in FilterKey:
            if matches_filter(vehicle, key):
                counts[key] += 1
    return counts


class FilterProjector:
    """Holds the user's query and filter key and projects snapshots with them."""

    def __init__(self, query: str = "", filter_key: FilterKey = FilterKey.ALL) -> None:
        self._query = query
        self._filter_key = FilterKey(filter_key)
        self.changed: Signal[FilterProjector] = Signal()

    @property
    def query(self) -> str:
        return self._query

    @property
    def filter_key(self) -> FilterKey:
        return self._filter_key

    def set_query(self, text: str) -> None:
        if text == self._query:
            return
        self._query = text
        self.changed.emit(self)

    def set_filter(self, key: FilterKey | str) -> None:
        """Switch the active filter.

        Raises :class:`ValueError` for a key that is not a :class:`FilterKey`.
        """
        filter_key = FilterKey(key)
        if filter_key == self._filter_key:
            return
        self._filter_key = filter_key
        self.changed.emit(self)

    def apply(self, vehicles: Iterable[Vehicle]) -> tuple[Vehicle, ...]:
        return project(vehicles, self._query, self._filter_key)
