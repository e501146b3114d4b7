"""Tidy a GeoJSON GPS trace from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..config import (
    TIDY_MAXIMUM_POINTS,
    TIDY_MINIMUM_DISTANCE_M,
    TIDY_MINIMUM_TIME_MS,
    TIDY_TIMESTAMP_KEY,
)
from ..errors import GeoTraceError
from ..geojson.codec import encode
from ..tidy import TidyOptions, count_fixes, tidy
from ._cli import load_trace, setup_logging


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the tidy tool."""

    parser = argparse.ArgumentParser(
        description=(
            "Drop redundant fixes from a GeoJSON GPS trace and write the"
            " result as a FeatureCollection of points."
        )
    )
    parser.add_argument("input", type=Path, help="GeoJSON trace to tidy")
    parser.add_argument(
        "--output",
        type=Path,
        help="Output path; the result is printed to stdout when omitted",
    )
    parser.add_argument(
        "--min-distance-m",
        type=float,
        default=TIDY_MINIMUM_DISTANCE_M,
        help=f"Minimum spacing in metres (default: {TIDY_MINIMUM_DISTANCE_M:g})",
    )
    parser.add_argument(
        "--min-time-ms",
        type=float,
        default=TIDY_MINIMUM_TIME_MS,
        help=f"Minimum interval in milliseconds (default: {TIDY_MINIMUM_TIME_MS:g})",
    )
    parser.add_argument(
        "--max-points",
        type=int,
        default=TIDY_MAXIMUM_POINTS,
        help=f"Maximum number of output points (default: {TIDY_MAXIMUM_POINTS})",
    )
    parser.add_argument(
        "--timestamp-key",
        default=TIDY_TIMESTAMP_KEY,
        help=f"Property holding fix timestamps (default: {TIDY_TIMESTAMP_KEY})",
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="Pretty-print the output with this many spaces",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m geotrace.tools.tidy_geojson``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging()

    try:
        options = TidyOptions(
            minimum_distance_m=args.min_distance_m,
            minimum_time_ms=args.min_time_ms,
            maximum_points=args.max_points,
            timestamp_key=args.timestamp_key,
        )
        trace = load_trace(args.input)
        before = count_fixes(trace, options.timestamp_key)
        result = tidy(trace, options)
        text = encode(result, indent=args.indent)
    except OSError as exc:
        logging.error("Failed to read '%s': %s", args.input, exc)
        return 1
    except GeoTraceError as exc:
        logging.error("Failed to tidy '%s': %s", args.input, exc)
        return 1

    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(text + "\n", encoding="utf-8")
        except OSError as exc:
            logging.error("Failed to write '%s': %s", args.output, exc)
            return 1
        logging.info("Tidy trace written to %s", args.output)

    logging.info("Kept %d of %d fixes", len(result), before)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
