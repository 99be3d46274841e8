"""Shared pytest fixtures for snowbot tests.

Test Tiers:
- unit: Fast tests with fixtures, no network (default)
- integration: Tests that run the full decode -> summarize chain on saved documents

Run only the integration tier with: pytest -m integration
"""

import pytest

from snowbot.forecast.models import Location


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: fast unit tests using fixtures")
    config.addinivalue_line("markers", "integration: full decode and render chain on saved documents")


@pytest.fixture
def sample_locations() -> list[Location]:
    """Three tracked locations in query order."""
    return [
        Location("loc-tahoe", "Lake Tahoe", 39.0968, -120.0324, "America/Los_Angeles"),
        Location("loc-alta", "Alta", 40.5884, -111.6386, "America/Denver"),
        Location("loc-zermatt", "Zermatt", 46.0207, 7.7491),
    ]


@pytest.fixture
def sample_times() -> list[str]:
    """Four hourly UTC timesteps."""
    return [
        "2024-01-19T14:00:00Z",
        "2024-01-19T15:00:00Z",
        "2024-01-19T16:00:00Z",
        "2024-01-19T20:00:00Z",
    ]


def make_response(times, values, parameter="categorical_snow_surface") -> dict:
    """Build a minimal CoverageJSON position-query document."""
    return {
        "type": "Coverage",
        "domain": {
            "type": "Domain",
            "axes": {
                "t": {"values": times},
                "x": {"values": [-120.0324, -111.6386, 7.7491]},
                "y": {"values": [39.0968, 40.5884, 46.0207]},
            },
        },
        "ranges": {
            parameter: {
                "type": "NdArray",
                "axisNames": ["t", "points"],
                "shape": [len(times), 3],
                "values": values,
            }
        },
    }


@pytest.fixture
def sample_response(sample_times) -> dict:
    """Response for sample_locations x sample_times.

    Row-major, time-major:
        t0: tahoe
        t1: tahoe, alta
        t2: tahoe
        t3: alta
    """
    values = [
        1, 0, 0,
        1, 1, 0,
        1, 0, 0,
        0, 1, 0,
    ]
    return make_response(sample_times, values)


@pytest.fixture
def response_factory():
    """Factory for CoverageJSON documents: response_factory(times, values, parameter=...)."""
    return make_response
