"""Snow forecast decoding and display windows.

Typical flow:

    >>> timelines = decode(response_json, locations)
    >>> for item in summarize(timelines, include_empty=False):
    ...     print(item.location_name, ", ".join(item.windows))

Run offline against saved files via:
    python -m snowbot response.json --locations locations.json
"""

from snowbot.forecast.covjson import CovJsonResponse
from snowbot.forecast.decoder import (
    CATEGORICAL_SNOW,
    POSITIVE_CODE,
    DecodeError,
    FlatAxis,
    NestedAxis,
    ValueGrid,
    decode,
    log_timelines,
    resolve_time_axis,
    timelines_to_frame,
    validate_response,
)
from snowbot.forecast.models import (
    DisplayWindow,
    Location,
    LocationWindows,
    SnowTimeline,
    locations_from_records,
)
from snowbot.forecast.windows import (
    MAX_GAP_HOURS,
    aggregate,
    merge_timestamps,
    render_window,
    summarize,
)

__all__ = [
    "CATEGORICAL_SNOW",
    "CovJsonResponse",
    "DecodeError",
    "DisplayWindow",
    "FlatAxis",
    "Location",
    "LocationWindows",
    "MAX_GAP_HOURS",
    "NestedAxis",
    "POSITIVE_CODE",
    "SnowTimeline",
    "ValueGrid",
    "aggregate",
    "decode",
    "locations_from_records",
    "log_timelines",
    "merge_timestamps",
    "render_window",
    "resolve_time_axis",
    "summarize",
    "timelines_to_frame",
    "validate_response",
]
