"""Shared utilities for snowbot."""

from .base import ValidationResult
from .geo import WORLD_BBOX, BoundingBox, build_multipoint_wkt, validate_coordinates
from .tz import (
    DEFAULT_TIMEZONE,
    LocalFields,
    format_date,
    format_hour,
    parse_instant,
    parse_instants,
    resolve_zone,
    to_local_fields,
)

__all__ = [
    "BoundingBox",
    "DEFAULT_TIMEZONE",
    "LocalFields",
    "ValidationResult",
    "WORLD_BBOX",
    "build_multipoint_wkt",
    "format_date",
    "format_hour",
    "parse_instant",
    "parse_instants",
    "resolve_zone",
    "to_local_fields",
    "validate_coordinates",
]
