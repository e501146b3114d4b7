"""Benchmark the decode, tidy and encode pipeline on long synthetic traces."""

from __future__ import annotations

import argparse
import statistics
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from geotrace.config import TIDY_TIMESTAMP_KEY  # noqa: E402
from geotrace.geojson.codec import decode_feature_collection, encode  # noqa: E402
from geotrace.geojson.models import (  # noqa: E402
    Feature,
    FeatureCollection,
    LineString,
    Position,
)
from geotrace.tidy import TidyOptions, tidy  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one pipeline run."""

    decode: float
    tidy: float
    encode: float

    @property
    def total(self) -> float:
        """Return the aggregate duration for this benchmark iteration."""

        return self.decode + self.tidy + self.encode


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    point_count: int
    iterations: int
    output_points: int
    mean_decode_ms: float
    mean_tidy_ms: float
    mean_encode_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_trace_text(point_count: int) -> str:
    """Generate a northbound walk with one fix per second as GeoJSON text."""

    base_lat = 37.0
    base_lon = -122.0
    step_deg = 1.2e-5
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    positions = [
        Position(base_lon, base_lat + idx * step_deg) for idx in range(point_count)
    ]
    timestamps = [
        (start + timedelta(seconds=idx)).strftime("%Y-%m-%dT%H:%M:%SZ")
        for idx in range(point_count)
    ]
    feature = Feature.from_geometry(
        LineString(positions), {TIDY_TIMESTAMP_KEY: timestamps}
    )
    return encode(FeatureCollection.from_feature(feature))


def _run_iteration(text: str, options: TidyOptions) -> tuple[StageDurations, int]:
    """Execute one benchmark iteration and capture per-stage timings."""

    start = time.perf_counter()
    trace = decode_feature_collection(text)
    decode_dur = time.perf_counter() - start

    start = time.perf_counter()
    result = tidy(trace, options)
    tidy_dur = time.perf_counter() - start

    start = time.perf_counter()
    _ = encode(result)
    encode_dur = time.perf_counter() - start

    return StageDurations(decode=decode_dur, tidy=tidy_dur, encode=encode_dur), len(
        result
    )


def run_benchmark(
    point_count: int,
    iterations: int,
    max_points: int,
) -> BenchmarkSummary:
    """Benchmark the tidy pipeline and return aggregated timings."""

    if point_count < 10000:
        raise ValueError("point_count must be at least 10,000")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    text = _build_trace_text(point_count)
    options = TidyOptions(maximum_points=max_points)

    durations: List[StageDurations] = []
    output_points = 0
    for _ in range(iterations):
        stage, output_points = _run_iteration(text, options)
        durations.append(stage)

    return BenchmarkSummary(
        point_count=point_count,
        iterations=iterations,
        output_points=output_points,
        mean_decode_ms=statistics.fmean(item.decode for item in durations) * 1000.0,
        mean_tidy_ms=statistics.fmean(item.tidy for item in durations) * 1000.0,
        mean_encode_ms=statistics.fmean(item.encode for item in durations) * 1000.0,
        mean_total_ms=statistics.fmean(item.total for item in durations) * 1000.0,
        worst_total_ms=max(item.total for item in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    """Return a JSON-friendly representation of the benchmark summary."""

    return {
        "point_count": summary.point_count,
        "iterations": summary.iterations,
        "output_points": summary.output_points,
        "mean_decode_ms": summary.mean_decode_ms,
        "mean_tidy_ms": summary.mean_tidy_ms,
        "mean_encode_ms": summary.mean_encode_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark decode, tidy and encode on long traces",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=50000,
        help="Number of fixes in the synthetic trace",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    parser.add_argument(
        "--max-points",
        type=int,
        default=1000,
        help="Point budget passed to tidy",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.points, args.iterations, args.max_points)
    formatted = _format_summary(summary)
    for key, value in formatted.items():
        if key in {"point_count", "iterations", "output_points"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
