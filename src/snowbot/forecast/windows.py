"""Merge snow timestamps into display windows and render them.

Consecutive positive timestamps are merged greedily: a timestamp joins the
current window when it is at most ``MAX_GAP_HOURS`` after the window's end,
measured on UTC instants. Each window is then rendered in the location's
local time zone:

    single instant      "Fri 1/19 8pm"
    same local day      "Fri 1/19 2pm-3pm"
    across local days   "Fri 1/19 11pm - Sat 1/20 12am"
"""

import logging
from datetime import tzinfo
from typing import Optional, Sequence, Union

import pandas as pd

from snowbot.forecast.models import DisplayWindow, LocationWindows, SnowTimeline
from snowbot.utils.tz import (
    InstantLike,
    format_date,
    format_hour,
    parse_instant,
    resolve_zone,
    to_local_fields,
)

logger = logging.getLogger(__name__)

# Largest gap (hours) between a window's end and the next timestamp that still merges
MAX_GAP_HOURS = 1.0

SECONDS_PER_HOUR = 3600


def merge_timestamps(
    timestamps: Sequence[InstantLike],
    max_gap_hours: float = MAX_GAP_HOURS,
) -> list[list[pd.Timestamp]]:
    """Group ordered timestamps into runs separated by more than ``max_gap_hours``.

    Single pass, no backtracking. A gap of exactly ``max_gap_hours`` merges.

    Returns:
        List of runs; each run is a non-empty list of UTC Timestamps
    """
    runs: list[list[pd.Timestamp]] = []
    current: list[pd.Timestamp] = []

    for ts in (parse_instant(value) for value in timestamps):
        if current:
            gap_hours = (ts - current[-1]).total_seconds() / SECONDS_PER_HOUR
            if gap_hours <= max_gap_hours:
                current.append(ts)
                continue
            runs.append(current)
        current = [ts]

    if current:
        runs.append(current)
    return runs


def render_window(
    start: InstantLike,
    end: InstantLike,
    zone: Optional[Union[str, tzinfo]] = None,
) -> str:
    """Render a window as text in ``zone`` (UTC when not given)."""
    zone = resolve_zone(zone)
    start_fields = to_local_fields(start, zone)
    start_label = f"{format_date(start_fields)} {format_hour(start_fields.hour)}"

    if parse_instant(start) == parse_instant(end):
        return start_label

    end_fields = to_local_fields(end, zone)
    if start_fields.date == end_fields.date:
        return f"{start_label}-{format_hour(end_fields.hour)}"

    return f"{start_label} - {format_date(end_fields)} {format_hour(end_fields.hour)}"


def aggregate(
    timestamps: Sequence[InstantLike],
    timezone: Optional[Union[str, tzinfo]] = None,
    max_gap_hours: float = MAX_GAP_HOURS,
) -> list[DisplayWindow]:
    """Merge one location's timestamps into rendered display windows.

    Args:
        timestamps: Positive instants in chronological order
        timezone: IANA zone used for rendering; unknown or missing -> UTC
        max_gap_hours: Largest gap that still extends a window

    Returns:
        Windows in chronological order; empty when ``timestamps`` is empty
    """
    if len(timestamps) == 0:
        return []

    zone = resolve_zone(timezone)
    windows = []
    for run in merge_timestamps(timestamps, max_gap_hours):
        start, end = run[0], run[-1]
        windows.append(
            DisplayWindow(
                start=start,
                end=end,
                timestamps=tuple(run),
                label=render_window(start, end, zone),
            )
        )
    return windows


def summarize(
    timelines: Sequence[SnowTimeline],
    include_empty: bool = True,
    max_gap_hours: float = MAX_GAP_HOURS,
) -> list[LocationWindows]:
    """Build display windows for every timeline, each in its location's zone.

    Args:
        timelines: Output of ``decode``
        include_empty: Keep locations with no snow (with an empty window list)
        max_gap_hours: Largest gap that still extends a window

    Returns:
        One LocationWindows per (kept) timeline, in input order
    """
    results = []
    for timeline in timelines:
        if not timeline.has_snow and not include_empty:
            continue

        location = timeline.location
        zone = resolve_zone(location.timezone, context=location.name)
        windows = aggregate(timeline.timestamps, zone, max_gap_hours)
        logger.debug(
            f"{location.name}: {len(timeline.timestamps)} timestamps -> "
            f"{len(windows)} windows"
        )
        results.append(LocationWindows(location.name, [w.label for w in windows]))

    return results
