"""Alert ledger.

Holds alert records keyed by id and tracks the read flag. Badge counts are
derived by a full pass over the ledger on every call, so they always equal
the number of unread alerts exactly; nothing is cached between calls.
"""

from __future__ import annotations

import logging

from fleetview.models.alert import Alert
from fleetview.state.signals import Signal

_logger = logging.getLogger(__name__)


class AlertLedger:
    """Append-mostly alert collection with a mutable read flag."""

    def __init__(self) -> None:
        self._alerts: dict[str, Alert] = {}
        self._arrival: dict[str, int] = {}
        self._sequence = 0
        self.changed: Signal[Alert] = Signal()

    def ingest(self, alert: Alert) -> Alert:
        """Store *alert*, overwriting an existing record with the same id.

        A re-delivered alert never turns an acknowledged alert unread again.
        Returns the stored record.
        """
        existing = self._alerts.get(alert.id)
        stored = alert
        if existing is not None and existing.read and not alert.read:
            stored = alert.model_copy(update={"read": True})
        if existing is None:
            self._arrival[alert.id] = self._sequence
            self._sequence += 1
        self._alerts[alert.id] = stored
        self.changed.emit(stored)
        return stored

    def mark_read(self, alert_id: str) -> bool:
        """Acknowledge an alert.

        Returns ``True`` when the flag changed. Unknown ids and alerts that
        are already read are a no-op.
        """
        alert = self._alerts.get(alert_id)
        if alert is None:
            _logger.debug("mark_read ignored for unknown alert %s", alert_id)
            return False
        if alert.read:
            return False
        updated = alert.model_copy(update={"read": True})
        self._alerts[alert_id] = updated
        self.changed.emit(updated)
        return True

    def get(self, alert_id: str) -> Alert | None:
        return self._alerts.get(alert_id)

    def unread_count_for(self, vehicle_id: str) -> int:
        return sum(1 for alert in self._alerts.values() if alert.vehicle_id == vehicle_id and not alert.read)

    def unread_total(self) -> int:
        return sum(1 for alert in self._alerts.values() if not alert.read)

    def list_for(self, vehicle_id: str) -> list[Alert]:
        """All alerts for *vehicle_id*, newest first.

        Alerts sharing a timestamp are ordered by arrival, latest first.
        """
        matching = [alert for alert in self._alerts.values() if alert.vehicle_id == vehicle_id]
        return sorted(matching, key=lambda alert: (alert.timestamp, self._arrival[alert.id]), reverse=True)

    def alerts(self) -> tuple[Alert, ...]:
        return tuple(self._alerts.values())

    def __len__(self) -> int:
        return len(self._alerts)
