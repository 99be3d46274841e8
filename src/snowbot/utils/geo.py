"""Geographic utilities and constants."""

from dataclasses import dataclass
from typing import Iterable, Protocol

LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


class HasCoordinates(Protocol):
    lat: float
    lon: float


@dataclass
class BoundingBox:
    """Geographic bounding box."""

    west: float
    south: float
    east: float
    north: float

    def contains(self, lat: float, lon: float) -> bool:
        """Check if a point is within this bounding box."""
        return (
            self.south <= lat <= self.north
            and self.west <= lon <= self.east
        )


# Whole globe, the valid range for any stored location
WORLD_BBOX = BoundingBox(
    west=LON_RANGE[0],
    south=LAT_RANGE[0],
    east=LON_RANGE[1],
    north=LAT_RANGE[1],
)


def validate_coordinates(lat: float, lon: float) -> None:
    """Raise ValueError unless (lat, lon) is a valid position.

    Args:
        lat: Latitude in decimal degrees (-90 to 90)
        lon: Longitude in decimal degrees (-180 to 180)

    Raises:
        ValueError: If either coordinate is not a number or out of range
    """
    for label, value in (("lat", lat), ("lon", lon)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{label} must be a number, got {value!r}")
        if value != value:
            raise ValueError(f"{label} must not be NaN")

    if not WORLD_BBOX.contains(lat, lon):
        raise ValueError(
            f"Invalid coordinates ({lat}, {lon}). "
            f"Latitude must be {LAT_RANGE[0]:g} to {LAT_RANGE[1]:g}, "
            f"longitude {LON_RANGE[0]:g} to {LON_RANGE[1]:g}."
        )


def build_multipoint_wkt(locations: Iterable[HasCoordinates]) -> str:
    """Encode locations as a WKT MULTIPOINT, preserving their order.

    The position of each point is the location index ``p`` used when the
    gridded response is decoded. WKT uses (lon lat) order, not (lat lon).

    Example:
        >>> build_multipoint_wkt([Location("abc", "Lake Tahoe", 39.0968, -120.0324)])
        'MULTIPOINT(-120.0324 39.0968)'
    """
    points = ", ".join(f"{loc.lon} {loc.lat}" for loc in locations)
    return f"MULTIPOINT({points})"
