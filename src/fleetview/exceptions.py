"""Custom exception hierarchy for fleetview."""

from __future__ import annotations

from typing import Any


class FleetViewError(Exception):
    """Base exception for all fleetview errors."""


class FleetViewConfigError(FleetViewError):
    """Invalid or missing configuration."""


class FleetViewPayloadError(FleetViewError):
    """Inbound feed payload is malformed and was rejected as a whole.

    Nothing from a rejected payload reaches the state layer; the snapshot
    never holds a half-written record.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str = "",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.kind = kind
        self.errors = errors or []
        super().__init__(message)


class FleetViewTransportError(FleetViewError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
