"""Bounded position history of the selected vehicle."""

from __future__ import annotations

from collections import deque

from fleetview._constants import TRAIL_CAPACITY
from fleetview.models.vehicle import TrailPoint
from fleetview.state.signals import Signal


class TrailAccumulator:
    """FIFO of the most recent positions, oldest first.

    Holds coordinates only; which vehicle they belong to is the selection
    machine's concern.
    """

    def __init__(self, capacity: int = TRAIL_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._points: deque[TrailPoint] = deque(maxlen=capacity)
        self.changed: Signal[tuple[TrailPoint, ...]] = Signal()

    @property
    def capacity(self) -> int:
        return self._points.maxlen or 0

    def reset(self, initial: TrailPoint | None = None) -> None:
        """Clear the history, seeding it with *initial* when given."""
        self._points.clear()
        if initial is not None:
            self._points.append(initial)
        self.changed.emit(self.current())

    def clear(self) -> None:
        self.reset(None)

    def push(self, point: TrailPoint) -> None:
        """Append *point*, dropping the oldest sample beyond capacity."""
        self._points.append(point)
        self.changed.emit(self.current())

    def current(self) -> tuple[TrailPoint, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)
