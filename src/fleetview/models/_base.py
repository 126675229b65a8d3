"""Base model and timestamp helpers for fleet payloads.

Every fleet record inherits from :class:`FleetBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase wire keys
  (``licensePlate``, ``currentSpeed``, ...) map to snake_case fields.
* ``frozen=True``: records are values. A newer record replaces an older
  one; nothing is mutated after validation.
* A ``model_validator(mode="before")`` that drops ``null`` values so the
  field default applies (optional fields) or validation fails (required
  fields).

Timestamps arrive either as ISO-8601 strings or as epoch numbers in
seconds or milliseconds; :data:`FleetTimestamp` normalizes all of them to
timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def _from_epoch(value: float) -> datetime:
    if value >= _MS_THRESHOLD:
        value = value / 1000.0
    return datetime.fromtimestamp(value, tz=UTC)


def parse_timestamp(value: Any) -> datetime:
    """Convert an epoch number (seconds **or** milliseconds) or ISO string to a UTC datetime.

    Raises :class:`ValueError` for anything else so pydantic reports the
    field as invalid.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bool):
        raise ValueError("timestamp must be a number or an ISO-8601 string")
    if isinstance(value, (int, float)):
        return _from_epoch(float(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("timestamp must not be empty")
        try:
            return _from_epoch(float(text))
        except ValueError:
            pass
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    raise ValueError(f"unsupported timestamp value: {value!r}")


FleetTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces epoch numbers and ISO strings to UTC datetimes."""


def format_age(timestamp: datetime, now: datetime | None = None) -> str:
    """Render how long ago *timestamp* was, the way the detail panel shows it.

    ``"42s"`` under a minute, ``"5min"`` under an hour, ``"3h"`` under a
    day, and the calendar date (``"2026-10-18"``) beyond that.
    """
    if now is None:
        now = datetime.now(UTC)
    seconds = max(0, int((now - timestamp).total_seconds()))
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}min"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return timestamp.date().isoformat()


class FleetBaseModel(BaseModel):
    """Base for fleet records and view structures."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
