"""Synchronous change notifications.

Components announce changes through a :class:`Signal`; listeners run
immediately, in connection order, on the emitting call stack. There is no
queueing, so a mutation and every reaction to it complete before the next
event is processed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Signal(Generic[T]):
    """A list of callbacks invoked with one payload per emission."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[T], None]] = []

    def connect(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback* and return a function that disconnects it."""
        self._callbacks.append(callback)

        def _disconnect() -> None:
            self._callbacks = [cand for cand in self._callbacks if cand is not callback]

        return _disconnect

    def emit(self, payload: T) -> None:
        # Snapshot the list so callbacks may disconnect themselves.
        for callback in list(self._callbacks):
            callback(payload)

    def __len__(self) -> int:
        return len(self._callbacks)
