"""Tests for window merging and rendering.

Merging is checked on synthetic timestamp lists; rendering is checked in
UTC and in zones with DST and non-integer offsets.
"""

import logging
from datetime import datetime, timezone

import pandas as pd
import pytest

from snowbot.forecast.decoder import decode
from snowbot.forecast.models import Location, SnowTimeline
from snowbot.forecast.windows import (
    MAX_GAP_HOURS,
    aggregate,
    merge_timestamps,
    render_window,
    summarize,
)


def labels(windows) -> list[str]:
    return [w.label for w in windows]


class TestMergeTimestamps:
    """Tests for greedy gap merging."""

    def test_default_gap_is_one_hour(self):
        """Default tolerance is one hour."""
        assert MAX_GAP_HOURS == 1.0

    def test_empty(self):
        """No timestamps, no runs."""
        assert merge_timestamps([]) == []

    def test_single(self):
        """One timestamp is one run."""
        runs = merge_timestamps(["2024-01-19T14:00:00Z"])
        assert runs == [[pd.Timestamp("2024-01-19T14:00:00Z")]]

    def test_exactly_one_hour_merges(self):
        """A 3600 s gap stays in the same run."""
        runs = merge_timestamps(["2024-01-19T14:00:00Z", "2024-01-19T15:00:00Z"])
        assert len(runs) == 1

    def test_one_second_over_splits(self):
        """A 3601 s gap starts a new run."""
        runs = merge_timestamps(["2024-01-19T14:00:00Z", "2024-01-19T15:00:01Z"])
        assert len(runs) == 2

    def test_gap_measured_from_window_end(self):
        """Sub-hour steps chain into one run."""
        runs = merge_timestamps([
            "2024-01-19T14:00:00Z",
            "2024-01-19T14:30:00Z",
            "2024-01-19T15:30:00Z",
            "2024-01-19T16:30:00Z",
        ])
        assert len(runs) == 1

    def test_duplicates_merge(self):
        """Repeated instants have zero gap."""
        runs = merge_timestamps(["2024-01-19T14:00:00Z", "2024-01-19T14:00:00Z"])
        assert len(runs) == 1
        assert len(runs[0]) == 2

    def test_custom_gap(self):
        """Larger tolerance merges wider gaps."""
        stamps = ["2024-01-19T14:00:00Z", "2024-01-19T17:00:00Z"]
        assert len(merge_timestamps(stamps, max_gap_hours=3)) == 1
        assert len(merge_timestamps(stamps, max_gap_hours=2.5)) == 2

    def test_gap_uses_utc_instants(self):
        """Offsets in the input do not change the measured gap."""
        runs = merge_timestamps(["2024-01-19T14:00:00Z", "2024-01-19T08:00:00-07:00"])
        assert len(runs) == 1


class TestRenderWindow:
    """Tests for render_window()."""

    def test_single_instant(self):
        """start == end renders without a range."""
        assert render_window("2024-01-19T20:00:00Z", "2024-01-19T20:00:00Z") == "Fri 1/19 8pm"

    def test_same_day_range(self):
        """Same local date renders "<date> <start>-<end>"."""
        assert (
            render_window("2024-01-19T14:00:00Z", "2024-01-19T15:00:00Z")
            == "Fri 1/19 2pm-3pm"
        )

    def test_cross_day_range(self):
        """Different local dates render both dates."""
        assert (
            render_window("2024-01-19T23:00:00Z", "2024-01-20T00:00:00Z")
            == "Fri 1/19 11pm - Sat 1/20 12am"
        )

    @pytest.mark.parametrize(
        "hour,expected",
        [(0, "12am"), (1, "1am"), (11, "11am"), (12, "12pm"), (13, "1pm"), (23, "11pm")],
    )
    def test_hour_labels(self, hour, expected):
        """12-hour clock labels in UTC."""
        stamp = f"2024-01-19T{hour:02d}:00:00Z"
        assert render_window(stamp, stamp) == f"Fri 1/19 {expected}"

    def test_no_zero_padding(self):
        """Month and day are not zero padded."""
        assert render_window("2024-03-05T09:00:00Z", "2024-03-05T09:00:00Z") == "Tue 3/5 9am"

    def test_denver(self):
        """Winter Denver is UTC-7."""
        assert (
            render_window("2024-01-19T14:00:00Z", "2024-01-19T15:00:00Z", "America/Denver")
            == "Fri 1/19 7am-8am"
        )

    def test_local_day_boundary_differs_from_utc(self):
        """Same UTC day can span two local days."""
        start, end = "2024-01-20T07:00:00Z", "2024-01-20T08:00:00Z"
        assert render_window(start, end) == "Sat 1/20 7am-8am"
        assert (
            render_window(start, end, "America/Los_Angeles")
            == "Fri 1/19 11pm - Sat 1/20 12am"
        )

    def test_half_hour_offset(self):
        """Asia/Kolkata (+05:30) uses the local wall-clock hour."""
        assert (
            render_window("2024-01-19T14:00:00Z", "2024-01-19T15:00:00Z", "Asia/Kolkata")
            == "Fri 1/19 7pm-8pm"
        )

    def test_dst_transition(self):
        """Spring-forward skips 2am in New York."""
        assert (
            render_window("2024-03-10T06:00:00Z", "2024-03-10T07:00:00Z", "America/New_York")
            == "Sun 3/10 1am-3am"
        )

    def test_unknown_zone_falls_back_to_utc(self, caplog):
        """Unknown zone renders in UTC and logs a warning."""
        caplog.set_level(logging.WARNING, logger="snowbot")
        result = render_window("2024-01-19T14:00:00Z", "2024-01-19T14:00:00Z", "Mars/Olympus_Mons")
        assert result == "Fri 1/19 2pm"
        assert "Mars/Olympus_Mons" in caplog.text

    def test_accepts_datetimes(self):
        """datetime inputs render the same as ISO strings."""
        start = datetime(2024, 1, 19, 14, tzinfo=timezone.utc)
        end = datetime(2024, 1, 19, 15, tzinfo=timezone.utc)
        assert render_window(start, end) == "Fri 1/19 2pm-3pm"


class TestAggregate:
    """Tests for aggregate()."""

    def test_range_and_single_point(self):
        """Two windows: a range and a single point."""
        windows = aggregate([
            "2024-01-19T14:00:00Z",
            "2024-01-19T15:00:00Z",
            "2024-01-19T20:00:00Z",
        ])
        assert labels(windows) == ["Fri 1/19 2pm-3pm", "Fri 1/19 8pm"]

    def test_cross_day_example(self):
        """Window across midnight UTC."""
        windows = aggregate(["2024-01-19T23:00:00Z", "2024-01-20T00:00:00Z"], "UTC")
        assert labels(windows) == ["Fri 1/19 11pm - Sat 1/20 12am"]

    @pytest.mark.parametrize("tz", [None, "UTC", "America/Denver", "Not/AZone", ""])
    def test_empty_input(self, tz):
        """Empty input is an empty result, never an error."""
        assert aggregate([], tz) == []

    def test_timestamps_preserved(self):
        """Window members concatenate back to the input."""
        stamps = [
            "2024-01-19T10:00:00Z",
            "2024-01-19T11:00:00Z",
            "2024-01-19T13:00:00Z",
            "2024-01-19T13:30:00Z",
            "2024-01-20T02:00:00Z",
        ]
        windows = aggregate(stamps, "America/Denver")

        members = [stamp for w in windows for stamp in w.timestamps]
        assert members == [pd.Timestamp(s) for s in stamps]

    def test_window_bounds(self):
        """start/end are the first and last members."""
        windows = aggregate(["2024-01-19T14:00:00Z", "2024-01-19T15:00:00Z"])
        assert windows[0].start == pd.Timestamp("2024-01-19T14:00:00Z")
        assert windows[0].end == pd.Timestamp("2024-01-19T15:00:00Z")
        assert windows[0].end >= windows[0].start

    def test_windows_never_touch(self):
        """Consecutive windows are more than the tolerance apart."""
        stamps = [f"2024-01-19T{h:02d}:00:00Z" for h in (0, 1, 3, 4, 5, 8, 10, 11)]
        windows = aggregate(stamps)
        for prev, nxt in zip(windows, windows[1:]):
            assert (nxt.start - prev.end).total_seconds() > 3600

    def test_renders_in_zone(self):
        """Labels use the given zone."""
        windows = aggregate(["2024-01-19T14:00:00Z"], "America/Denver")
        assert labels(windows) == ["Fri 1/19 7am"]

    def test_custom_gap(self):
        """max_gap_hours widens the merge tolerance."""
        stamps = ["2024-01-19T14:00:00Z", "2024-01-19T16:00:00Z"]
        assert labels(aggregate(stamps, max_gap_hours=2)) == ["Fri 1/19 2pm-4pm"]


class TestSummarize:
    """Tests for summarize()."""

    def test_per_location_zones(self, sample_response, sample_locations):
        """Each location renders in its own zone; missing zone is UTC."""
        results = summarize(decode(sample_response, sample_locations))

        assert [r.location_name for r in results] == ["Lake Tahoe", "Alta", "Zermatt"]
        assert results[0].windows == ["Fri 1/19 6am-8am"]
        assert results[1].windows == ["Fri 1/19 8am", "Fri 1/19 1pm"]
        assert results[2].windows == []

    def test_exclude_empty(self, sample_response, sample_locations):
        """include_empty=False drops locations without snow."""
        results = summarize(decode(sample_response, sample_locations), include_empty=False)
        assert [r.location_name for r in results] == ["Lake Tahoe", "Alta"]

    def test_unknown_zone_warns_with_location(self, caplog):
        """Zone fallback is logged per location."""
        caplog.set_level(logging.WARNING, logger="snowbot")
        timeline = SnowTimeline(
            Location("x", "Nowhere Ridge", 45.0, -110.0, "Rocky/Nowhere"),
            [pd.Timestamp("2024-01-19T14:00:00Z")],
        )

        results = summarize([timeline])

        assert results[0].windows == ["Fri 1/19 2pm"]
        assert "Nowhere Ridge" in caplog.text
        assert "Rocky/Nowhere" in caplog.text

    def test_output_shape(self, sample_response, sample_locations):
        """to_dict gives the messaging layer's JSON shape."""
        results = summarize(decode(sample_response, sample_locations))
        assert results[0].to_dict() == {
            "locationName": "Lake Tahoe",
            "windows": ["Fri 1/19 6am-8am"],
        }
