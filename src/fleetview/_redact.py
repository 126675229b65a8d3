"""Helpers for safe debug logging.

Feed payloads carry license plates and live coordinates, and adapter
configuration carries broker credentials. Before payloads reach DEBUG logs:

* credentials are replaced with ``"<redacted>"``;
* license plates keep only their last two characters (``"***34"``);
* coordinates are rounded to :data:`COORDINATE_PRECISION` decimals
  (about 1 km), enough to tell vehicles apart in a trace without
  logging exact positions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

#: Decimal places kept for logged latitudes/longitudes.
COORDINATE_PRECISION = 2

_SECRET_KEYS: frozenset[str] = frozenset({"password", "token", "authorization", "cookie"})
_PLATE_KEYS: frozenset[str] = frozenset({"licenseplate", "license_plate", "plate"})
_COORDINATE_KEYS: frozenset[str] = frozenset({"latitude", "longitude", "lat", "lng", "lon"})

_MAX_DEPTH = 20


def _mask_plate(value: Any) -> str:
    text = str(value)
    if len(text) <= 2:
        return "***"
    return f"***{text[-2:]}"


def _coarsen(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "<redacted>"
    return round(float(value), COORDINATE_PRECISION)


def _redact_field(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS:
        return "<redacted>"
    if lowered in _PLATE_KEYS:
        return _mask_plate(value)
    if lowered in _COORDINATE_KEYS:
        return _coarsen(value)
    return redact_for_log(value, max_string=max_string, _depth=depth + 1)


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with credentials, plates and positions masked."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    match value:
        case None | bool() | int() | float():
            return value
        case str():
            return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
        case bytes() | bytearray():
            return f"<bytes:{len(value)}b>"
        case Mapping():
            return {str(k): _redact_field(str(k), v, max_string, _depth) for k, v in value.items()}
        case list() | tuple():
            return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
        case _:
            return repr(value)
