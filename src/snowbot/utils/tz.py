"""Instant parsing and time zone conversion for forecast display.

Every timestamp that reaches the display layer goes through this module:

- ``parse_instant`` / ``parse_instants`` normalize input to tz-aware UTC
- ``resolve_zone`` turns an optional IANA name into a ``ZoneInfo``,
  falling back to UTC when the name is missing or unknown
- ``to_local_fields`` is the single place where an instant is converted
  to wall-clock fields in a target zone

Conversions use the IANA database (``zoneinfo`` backed by ``tzdata``), so
DST transitions and non-integer offsets are handled. No fixed-offset
arithmetic is done anywhere.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Iterable, NamedTuple, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"

WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

InstantLike = Union[str, datetime, pd.Timestamp]

_UTC = ZoneInfo(DEFAULT_TIMEZONE)


class LocalFields(NamedTuple):
    """Wall-clock fields of an instant in a specific zone."""

    weekday: str
    month: int
    day: int
    hour: int
    date: date


def parse_instant(value: InstantLike) -> pd.Timestamp:
    """Parse a single instant into a tz-aware UTC Timestamp.

    Naive values are taken to already be in UTC.

    Raises:
        ValueError: If the value cannot be parsed
    """
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid timestamp {value!r}: {e}") from e

    if pd.isna(ts):
        raise ValueError(f"Invalid timestamp {value!r}")

    if ts.tz is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def parse_instants(values: Iterable[InstantLike]) -> list[pd.Timestamp]:
    """Parse a sequence of instants into tz-aware UTC Timestamps, keeping order.

    Raises:
        ValueError: If any value cannot be parsed
    """
    values = list(values)
    if not values:
        return []

    try:
        index = pd.to_datetime(values, utc=True, format="ISO8601")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid timestamp in time axis: {e}") from e

    if index.isna().any():
        bad = [values[i] for i in range(len(values)) if pd.isna(index[i])]
        raise ValueError(f"Invalid timestamp in time axis: {bad[:3]}")

    return list(index)


def resolve_zone(
    name: Optional[Union[str, tzinfo]],
    context: Optional[str] = None,
) -> tzinfo:
    """Resolve an IANA zone name, falling back to UTC.

    A missing zone is legal and resolves to UTC quietly. An unknown zone
    also resolves to UTC but is logged, so a batch where one location
    degraded to UTC can be spotted.

    Args:
        name: IANA zone identifier (e.g., "America/Denver"), a tzinfo, or None
        context: Optional label (e.g., location name) included in the warning

    Returns:
        tzinfo for the zone, or UTC
    """
    if name is None or name == "":
        return _UTC
    if isinstance(name, tzinfo):
        return name

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        where = f" for {context}" if context else ""
        logger.warning(
            f"Unknown time zone {name!r}{where}, falling back to {DEFAULT_TIMEZONE}"
        )
        return _UTC


def to_local_fields(
    instant: InstantLike,
    zone: Optional[Union[str, tzinfo]] = None,
) -> LocalFields:
    """Convert an instant to wall-clock fields in ``zone``.

    Example:
        >>> to_local_fields("2024-01-19T14:00:00Z", "America/Denver")
        LocalFields(weekday='Fri', month=1, day=19, hour=7, date=datetime.date(2024, 1, 19))
    """
    local = parse_instant(instant).tz_convert(resolve_zone(zone))
    return LocalFields(
        weekday=WEEKDAY_ABBREVIATIONS[local.weekday()],
        month=local.month,
        day=local.day,
        hour=local.hour,
        date=local.date(),
    )


def format_hour(hour: int) -> str:
    """Format a 0-23 hour as a 12-hour clock label (e.g., 14 -> "2pm")."""
    if hour == 0:
        return "12am"
    if hour == 12:
        return "12pm"
    if hour < 12:
        return f"{hour}am"
    return f"{hour - 12}pm"


def format_date(fields: LocalFields) -> str:
    """Format local fields as "<Weekday> <Month>/<Day>" (e.g., "Fri 1/19")."""
    return f"{fields.weekday} {fields.month}/{fields.day}"
