"""Decode a saved forecast response and print snow windows per location.

Works entirely offline on files: a CoverageJSON response saved from a
position query, and the location records the query was built from.

Usage:
    python -m snowbot response.json --locations locations.json
    python -m snowbot response.json --locations locations.json --snow-only
    python -m snowbot response.json --locations locations.json --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from snowbot.forecast.decoder import CATEGORICAL_SNOW, DecodeError, decode, log_timelines
from snowbot.forecast.models import LocationWindows, locations_from_records
from snowbot.forecast.windows import MAX_GAP_HOURS, summarize

logger = logging.getLogger(__name__)


def load_json(path: Path):
    """Read a JSON document from disk."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def run(
    response_path: Path,
    locations_path: Path,
    parameter: str = CATEGORICAL_SNOW,
    max_gap_hours: float = MAX_GAP_HOURS,
    snow_only: bool = False,
) -> list[LocationWindows]:
    """Decode and summarize one saved response.

    Args:
        response_path: CoverageJSON file
        locations_path: JSON list of location records, or id -> record mapping
        parameter: Range holding the categorical values
        max_gap_hours: Largest gap that still extends a window
        snow_only: Drop locations with no snow

    Returns:
        LocationWindows in location order

    Raises:
        DecodeError: If the response does not decode against the locations
        ValueError: If a location record is invalid
        OSError: If a file cannot be read
    """
    locations = locations_from_records(load_json(locations_path))
    logger.info(f"Checking {len(locations)} locations for snow...")

    timelines = decode(load_json(response_path), locations, parameter)
    log_timelines(timelines)

    return summarize(timelines, include_empty=not snow_only, max_gap_hours=max_gap_hours)


def format_text(results: Sequence[LocationWindows]) -> str:
    """One line per location: "<name>: <window>, <window>"."""
    lines = []
    for item in results:
        windows = ", ".join(item.windows) if item.windows else "No snow in forecast"
        lines.append(f"{item.location_name}: {windows}")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Print snow windows per location from a saved forecast response",
        epilog="""
Examples:
  python -m snowbot response.json --locations locations.json
  python -m snowbot response.json --locations kv_dump.json --snow-only --json
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "response",
        type=Path,
        help="CoverageJSON response file",
    )
    parser.add_argument(
        "--locations",
        type=Path,
        required=True,
        help="Location records (list, or id -> record mapping), in query order",
    )
    parser.add_argument(
        "--parameter",
        default=CATEGORICAL_SNOW,
        help=f"Range to decode (default: {CATEGORICAL_SNOW})",
    )
    parser.add_argument(
        "--max-gap-hours",
        type=float,
        default=MAX_GAP_HOURS,
        help=f"Largest gap that still merges into one window (default: {MAX_GAP_HOURS:g})",
    )
    parser.add_argument(
        "--snow-only",
        action="store_true",
        help="Omit locations with no snow in the forecast",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of text",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output except errors",
    )

    args = parser.parse_args(argv)

    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        results = run(
            args.response,
            args.locations,
            parameter=args.parameter,
            max_gap_hours=args.max_gap_hours,
            snow_only=args.snow_only,
        )
    except DecodeError as e:
        logger.error(f"Could not decode forecast: {e}")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    if args.json:
        print(json.dumps([item.to_dict() for item in results], indent=2))
    elif results:
        print(format_text(results))

    return 0


if __name__ == "__main__":
    sys.exit(main())
