"""Data models for decoded forecasts and display windows."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from snowbot.utils.geo import validate_coordinates


@dataclass(frozen=True)
class Location:
    """A tracked location, as stored by the location registry.

    The order in which locations are passed to a query defines the
    location axis of the gridded response.
    """

    id: str
    name: str
    lat: float
    lon: float
    timezone: Optional[str] = None  # IANA identifier, e.g. "America/Los_Angeles"

    def __post_init__(self):
        validate_coordinates(self.lat, self.lon)

    @classmethod
    def from_dict(cls, d: dict) -> "Location":
        """Create a Location from a stored record.

        Raises:
            ValueError: If the record is not a mapping, a required field is
                missing, or coordinates are invalid
        """
        if not isinstance(d, Mapping):
            raise ValueError(f"Location record must be an object, got {type(d).__name__}")
        missing = [key for key in ("id", "name", "lat", "lon") if key not in d]
        if missing:
            raise ValueError(f"Location record missing fields: {missing}")
        return cls(
            id=str(d["id"]),
            name=d["name"],
            lat=d["lat"],
            lon=d["lon"],
            timezone=d.get("timezone") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the stored record shape."""
        record = {"id": self.id, "name": self.name, "lat": self.lat, "lon": self.lon}
        if self.timezone:
            record["timezone"] = self.timezone
        return record


@dataclass
class SnowTimeline:
    """Timestamps at which snow is forecast for one location.

    Attributes:
        location: Location the timeline belongs to
        timestamps: tz-aware UTC instants in time-axis order
    """

    location: Location
    timestamps: list[pd.Timestamp] = field(default_factory=list)

    @property
    def has_snow(self) -> bool:
        """Whether any timestep was positive."""
        return len(self.timestamps) > 0


@dataclass(frozen=True)
class DisplayWindow:
    """A contiguous run of positive timestamps and its display label.

    Attributes:
        start: First instant in the window (UTC)
        end: Last instant in the window (UTC), end >= start
        timestamps: Every instant merged into this window, in order
        label: Rendered text, e.g. "Fri 1/19 2pm-3pm"
    """

    start: pd.Timestamp
    end: pd.Timestamp
    timestamps: tuple[pd.Timestamp, ...]
    label: str

    @property
    def is_single(self) -> bool:
        """Window covers a single instant."""
        return self.start == self.end

    @property
    def duration_hours(self) -> float:
        """Hours between start and end."""
        return (self.end - self.start).total_seconds() / 3600

    def __str__(self) -> str:
        return self.label


@dataclass
class LocationWindows:
    """Display windows for one location, ready for a chat message."""

    location_name: str
    windows: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape consumed by the messaging layer."""
        return {"locationName": self.location_name, "windows": list(self.windows)}


def locations_from_records(records) -> list[Location]:
    """Build Locations from stored records, keeping their order.

    Args:
        records: A list of record dicts, or a mapping of id -> record as
            dumped from the key-value store

    Returns:
        List of Location objects

    Raises:
        ValueError: If records is not a list or mapping, or a record is invalid
    """
    if isinstance(records, Mapping):
        records = list(records.values())
    elif not isinstance(records, list):
        raise ValueError(f"Location records must be a list or object, got {type(records).__name__}")
    return [Location.from_dict(record) for record in records]
