"""Selection/follow state machine.

The machine stores the selected id and a follow flag; the followed id is
derived from them, so "following a vehicle that is not selected" cannot be
represented. Selection is by id: the record shown for it is always looked
up in the snapshot at read time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from fleetview.state.signals import Signal


class SelectionPhase(StrEnum):
    IDLE = "idle"
    SELECTED = "selected"
    FOLLOWING = "following"


@dataclass(frozen=True, slots=True)
class SelectionChange:
    previous_id: str | None
    selected_id: str | None
    phase: SelectionPhase

    @property
    def selection_changed(self) -> bool:
        return self.previous_id != self.selected_id


class SelectionMachine:
    """Tracks the selected vehicle and whether the map follows it.

    Transitions::

        Idle      --select(id)--> Selected(id)
        Selected  --select(id)--> Selected(id)      (follow cleared)
        Following --select(id)--> Selected(id)      (follow cleared)
        Selected  --toggle-->     Following
        Following --toggle-->     Selected
        Idle      --toggle-->     Idle              (no-op)
        *         --close-->      Idle
    """

    def __init__(self) -> None:
        self._selected_id: str | None = None
        self._following = False
        self.changed: Signal[SelectionChange] = Signal()

    @property
    def phase(self) -> SelectionPhase:
        if self._selected_id is None:
            return SelectionPhase.IDLE
        if self._following:
            return SelectionPhase.FOLLOWING
        return SelectionPhase.SELECTED

    @property
    def selected_vehicle_id(self) -> str | None:
        return self._selected_id

    @property
    def follow_vehicle_id(self) -> str | None:
        return self._selected_id if self._following else None

    @property
    def is_following(self) -> bool:
        return self.follow_vehicle_id is not None

    def select(self, vehicle_id: str) -> None:
        """Select *vehicle_id*; always clears follow, valid from any phase."""
        previous = self._selected_id
        self._selected_id = vehicle_id
        self._following = False
        self._emit(previous)

    def close(self) -> None:
        previous = self._selected_id
        if previous is None and not self._following:
            return
        self._selected_id = None
        self._following = False
        self._emit(previous)

    def toggle_follow(self) -> bool:
        """Flip follow mode for the selected vehicle.

        Returns the new follow state; a no-op returning ``False`` while idle.
        """
        if self._selected_id is None:
            return False
        self._following = not self._following
        self._emit(self._selected_id)
        return self._following

    def _emit(self, previous: str | None) -> None:
        self.changed.emit(SelectionChange(previous_id=previous, selected_id=self._selected_id, phase=self.phase))
