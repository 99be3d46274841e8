"""Decode gridded categorical forecasts into per-location snow timelines.

A position query for N locations returns one value per (time, location)
pair, packed into a flat row-major array: time varies slowest, so the value
for timestep ``t`` and location ``p`` lives at index ``t * N + p``. The
location axis follows the order of the locations used to build the query
(see ``snowbot.utils.geo.build_multipoint_wkt``).

Example:
    >>> timelines = decode(response_json, locations)
    >>> [len(tl.timestamps) for tl in timelines]
    [3, 0, 5]
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
from pydantic import ValidationError

from snowbot.forecast.covjson import CovJsonResponse
from snowbot.forecast.models import Location, SnowTimeline
from snowbot.utils.base import ValidationResult
from snowbot.utils.tz import parse_instants

logger = logging.getLogger(__name__)

# Parameter queried for the snow signal
CATEGORICAL_SNOW = "categorical_snow_surface"

# Categorical code meaning "snow present"
POSITIVE_CODE = 1

FRAME_COLUMNS = ["location_id", "name", "lat", "lon", "valid_time"]


class DecodeError(ValueError):
    """Forecast response is missing fields or does not match the query."""


@dataclass(frozen=True)
class FlatAxis:
    """Time axis delivered as a flat sequence of instants."""

    values: tuple[str, ...]

    def flatten(self) -> list[str]:
        return list(self.values)


@dataclass(frozen=True)
class NestedAxis:
    """Time axis delivered as chunks (one per forecast init time)."""

    chunks: tuple[tuple[str, ...], ...]

    def flatten(self) -> list[str]:
        return [value for chunk in self.chunks for value in chunk]


TimeAxis = Union[FlatAxis, NestedAxis]


def as_time_axis(values: Sequence) -> TimeAxis:
    """Classify raw time axis values as flat or nested.

    Raises:
        DecodeError: If flat and nested entries are mixed
    """
    nested = [isinstance(v, (list, tuple)) for v in values]
    if all(nested) and nested:
        return NestedAxis(tuple(tuple(chunk) for chunk in values))
    if any(nested):
        raise DecodeError("Time axis mixes nested and flat values")
    return FlatAxis(tuple(values))


def resolve_time_axis(values: Sequence) -> list[str]:
    """Return the time axis as one flat, ordered list of instants."""
    return as_time_axis(values).flatten()


class ValueGrid:
    """Row-major (time, location) view over a flat value array.

    ``index_of`` and ``as_matrix`` are the only places the ``t * N + p``
    layout is encoded. ``null`` values are stored as NaN and never equal a
    code.
    """

    def __init__(self, values: Sequence[Optional[float]], n_locations: int):
        self._values = np.asarray(values, dtype=float)
        self.n_locations = n_locations

    def __len__(self) -> int:
        return len(self._values)

    def index_of(self, t: int, p: int) -> int:
        """Flat index for timestep ``t`` and location ``p``."""
        return t * self.n_locations + p

    def value_at(self, t: int, p: int) -> float:
        """Value for timestep ``t`` and location ``p``.

        Raises:
            DecodeError: If (t, p) falls outside the grid
        """
        if t < 0 or not 0 <= p < self.n_locations:
            raise DecodeError(
                f"Grid position (t={t}, p={p}) out of range for "
                f"{self.n_locations} locations"
            )
        idx = self.index_of(t, p)
        if idx >= len(self._values):
            raise DecodeError(
                f"Value index {idx} (t={t}, p={p}) out of range: "
                f"array has {len(self._values)} values"
            )
        return float(self._values[idx])

    def as_matrix(self, n_times: int) -> np.ndarray:
        """First ``n_times`` rows as a (time, location) array.

        Surplus values past ``n_times * N`` are dropped.

        Raises:
            DecodeError: If the array holds fewer than ``n_times * N`` values
        """
        expected = n_times * self.n_locations
        if len(self._values) < expected:
            raise DecodeError(
                f"Value array too short: {len(self._values)} values for "
                f"{n_times} times x {self.n_locations} locations ({expected} expected)"
            )
        return self._values[:expected].reshape(n_times, self.n_locations)

    def matching_times(self, p: int, n_times: int, code: int = POSITIVE_CODE) -> list[int]:
        """Timestep indices, ascending, where location ``p`` has ``code``."""
        if not 0 <= p < self.n_locations:
            raise DecodeError(
                f"Location index {p} out of range for {self.n_locations} locations"
            )
        return np.flatnonzero(self.as_matrix(n_times)[:, p] == code).tolist()


def parse_response(response: Union[Mapping, CovJsonResponse]) -> CovJsonResponse:
    """Validate a raw CoverageJSON document against the response schema.

    Raises:
        DecodeError: If required fields are missing or malformed
    """
    if isinstance(response, CovJsonResponse):
        return response
    if not isinstance(response, Mapping):
        raise DecodeError(
            f"Forecast response must be a JSON object, got {type(response).__name__}"
        )

    try:
        return CovJsonResponse.model_validate(response)
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        raise DecodeError(f"Malformed forecast response, bad fields: {fields}") from e


def validate_response(
    response: Union[Mapping, CovJsonResponse],
    n_locations: int,
    parameter: str = CATEGORICAL_SNOW,
) -> ValidationResult:
    """Check that a response can be decoded for ``n_locations`` locations.

    Args:
        response: Raw document or parsed CovJsonResponse
        n_locations: Number of locations the query was built from
        parameter: Range holding the categorical values

    Returns:
        ValidationResult with time/location counts and any issues

    Raises:
        DecodeError: If the document does not match the response schema
    """
    covjson = parse_response(response)
    issues = []
    stats: dict[str, Any] = {"ranges": sorted(covjson.ranges)}

    try:
        n_times = len(resolve_time_axis(covjson.domain.axes.t.values))
    except DecodeError as e:
        issues.append(str(e))
        n_times = 0

    value_range = covjson.ranges.get(parameter)
    if value_range is None:
        issues.append(
            f"Range '{parameter}' not found; available: {stats['ranges']}"
        )
    else:
        expected = n_times * n_locations
        actual = len(value_range.values)
        stats["expected_values"] = expected
        stats["actual_values"] = actual

        if actual < expected:
            issues.append(
                f"Value array too short: {actual} values for "
                f"{n_times} times x {n_locations} locations ({expected} expected)"
            )
        elif actual > expected:
            stats["surplus_values"] = actual - expected
            logger.warning(
                f"Value array has {actual - expected} values beyond "
                f"{n_times} times x {n_locations} locations; "
                "was the query built from a different location list?"
            )

    return ValidationResult(
        valid=len(issues) == 0,
        n_times=n_times,
        n_locations=n_locations,
        issues=issues,
        stats=stats,
    )


def decode(
    response: Union[Mapping, CovJsonResponse],
    locations: Sequence[Location],
    parameter: str = CATEGORICAL_SNOW,
) -> list[SnowTimeline]:
    """Decode a position-query response into one SnowTimeline per location.

    Timestamps keep time-axis order; nothing is sorted. Decoding is
    all-or-nothing: any structural problem raises before a result is built.

    Args:
        response: CoverageJSON document (parsed JSON or CovJsonResponse)
        locations: Locations in the same order used to build the query
        parameter: Range holding the categorical values

    Returns:
        List of SnowTimeline, same length and order as ``locations``

    Raises:
        DecodeError: If the response is malformed or too short for the locations
    """
    covjson = parse_response(response)
    n_locations = len(locations)

    validation = validate_response(covjson, n_locations, parameter)
    if not validation.valid:
        raise DecodeError(f"Forecast response failed validation: {validation.issues}")

    try:
        timestamps = parse_instants(resolve_time_axis(covjson.domain.axes.t.values))
    except ValueError as e:
        raise DecodeError(str(e)) from e

    grid = ValueGrid(covjson.ranges[parameter].values, n_locations)
    snow = grid.as_matrix(len(timestamps)) == POSITIVE_CODE

    timelines = []
    for p, location in enumerate(locations):
        hits = np.flatnonzero(snow[:, p])
        timelines.append(SnowTimeline(location, [timestamps[t] for t in hits]))

    logger.debug(
        f"Decoded {len(timestamps)} timesteps x {n_locations} locations, "
        f"{sum(tl.has_snow for tl in timelines)} with snow"
    )
    return timelines


def timelines_to_frame(timelines: Sequence[SnowTimeline]) -> pd.DataFrame:
    """Flatten timelines into one row per (location, positive timestamp).

    Returns:
        DataFrame with columns location_id, name, lat, lon, valid_time
    """
    records = []
    for timeline in timelines:
        loc = timeline.location
        for ts in timeline.timestamps:
            records.append({
                "location_id": loc.id,
                "name": loc.name,
                "lat": loc.lat,
                "lon": loc.lon,
                "valid_time": ts,
            })

    df = pd.DataFrame(records, columns=FRAME_COLUMNS)
    df["valid_time"] = pd.to_datetime(df["valid_time"], utc=True)
    return df


def log_timelines(timelines: Sequence[SnowTimeline], init_time: Optional[str] = None) -> None:
    """Log a per-location summary of decoded timelines."""
    logger.info("=== Snow Forecast Check ===")
    if init_time:
        logger.info(f"Init time: {init_time}")
    logger.info(f"Locations checked: {len(timelines)}")

    for timeline in timelines:
        loc = timeline.location
        if timeline.has_snow:
            joined = ", ".join(ts.isoformat() for ts in timeline.timestamps)
            logger.info(f'Location "{loc.name}" ({loc.lat}, {loc.lon}): snow at {joined}')
        else:
            logger.info(f'Location "{loc.name}" ({loc.lat}, {loc.lon}): No snow in forecast')

    logger.info("=== End Snow Forecast Check ===")
